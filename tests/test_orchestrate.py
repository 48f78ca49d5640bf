import pytest

from ps3upd.core import (
    IntegrityError, OverwritePolicy, UpdateRecord, bytes_to_mb, download_package,
    fetch_manifest, parse_manifest, run_downloads,
)
from ps3upd.core.orchestrate import parse_answer

from conftest import FakeResponse, FakeSession, make_manifest


def _rec(n, size=4):
    return UpdateRecord(
        title_id="BLUS30181", version=f"01.0{n}", size=size, size_mb=bytes_to_mb(size),
        system_version="03.4000", url=f"http://b0.test/tppkg/p{n}.pkg", title="Game",
    )


class Recorder:
    def __init__(self, answers=()):
        self.answers = list(answers)
        self.asked = []
        self.fetched = []

    def ask(self, rec, path):
        self.asked.append(path.name)
        return self.answers.pop(0)

    def fetch(self, rec, path):
        self.fetched.append(path.name)
        path.write_bytes(b"data")
        return path


def _existing(tmp_path, *names):
    for n in names:
        (tmp_path / n).write_bytes(b"old!")


def test_missing_files_download_without_asking(tmp_path):
    r = Recorder()
    s = run_downloads([_rec(1), _rec(2)], tmp_path, OverwritePolicy.ASK, fetch=r.fetch, ask=r.ask)
    assert r.fetched == ["p1.pkg", "p2.pkg"]
    assert r.asked == []
    assert len(s.downloaded) == 2


def test_no_then_all_then_no_prompt(tmp_path):
    _existing(tmp_path, "p1.pkg", "p2.pkg", "p3.pkg")
    r = Recorder(["n", "a", "whatever"])
    s = run_downloads([_rec(1), _rec(2), _rec(3)], tmp_path, OverwritePolicy.ASK,
                      fetch=r.fetch, ask=r.ask)
    assert r.asked == ["p1.pkg", "p2.pkg"]
    assert r.fetched == ["p2.pkg", "p3.pkg"]
    assert s.skipped == [tmp_path / "p1.pkg"]
    assert s.final_policy is OverwritePolicy.ALL


def test_yes_stays_in_ask(tmp_path):
    _existing(tmp_path, "p1.pkg", "p2.pkg")
    r = Recorder(["y", "maybe"])
    s = run_downloads([_rec(1), _rec(2)], tmp_path, "ask", fetch=r.fetch, ask=r.ask)
    assert r.asked == ["p1.pkg", "p2.pkg"]
    assert r.fetched == ["p1.pkg"]
    assert s.final_policy is OverwritePolicy.ASK


def test_skip_policy_never_asks(tmp_path):
    _existing(tmp_path, "p1.pkg")
    r = Recorder()
    s = run_downloads([_rec(1), _rec(2)], tmp_path, OverwritePolicy.SKIP, fetch=r.fetch)
    assert r.fetched == ["p2.pkg"]
    assert s.skipped == [tmp_path / "p1.pkg"]


def test_all_policy_overwrites_everything(tmp_path):
    _existing(tmp_path, "p1.pkg", "p2.pkg")
    r = Recorder()
    run_downloads([_rec(1), _rec(2)], tmp_path, OverwritePolicy.ALL, fetch=r.fetch)
    assert r.fetched == ["p1.pkg", "p2.pkg"]


def test_ask_policy_needs_prompt(tmp_path):
    with pytest.raises(ValueError):
        run_downloads([], tmp_path, OverwritePolicy.ASK, fetch=Recorder().fetch)


def test_on_record_called_before_each_download(tmp_path):
    _existing(tmp_path, "p1.pkg")
    seen = []
    r = Recorder(["n"])
    run_downloads([_rec(1), _rec(2)], tmp_path, OverwritePolicy.ASK, fetch=r.fetch, ask=r.ask,
                  on_record=lambda rec, path: seen.append(rec.version))
    assert seen == ["01.02"]


def _failing_fetch(rec, path):
    if rec.version == "01.01":
        raise IntegrityError(path, 4, 3)
    path.write_bytes(b"data")
    return path


def test_failure_stops_the_run(tmp_path):
    with pytest.raises(IntegrityError):
        run_downloads([_rec(1), _rec(2)], tmp_path, OverwritePolicy.ALL, fetch=_failing_fetch)
    assert not (tmp_path / "p2.pkg").exists()


def test_keep_going_isolates_failures(tmp_path):
    s = run_downloads([_rec(1), _rec(2)], tmp_path, OverwritePolicy.ALL,
                      fetch=_failing_fetch, keep_going=True)
    assert [rec.version for rec, _ in s.failed] == ["01.01"]
    assert s.downloaded == [tmp_path / "p2.pkg"]
    assert not s.ok


@pytest.mark.parametrize("raw,expected", [
    ("y", "yes"), ("YES", "yes"), (" a ", "all"), ("All", "all"),
    ("n", "no"), ("", "no"), (None, "no"), ("q", "no"),
])
def test_parse_answer(raw, expected):
    assert parse_answer(raw) == expected


def test_rerun_with_complete_files_downloads_nothing(tmp_path, config):
    manifest_url = config.manifest_url("BLUS30181")
    pkgs = [
        {"version": "01.01", "size": "4", "url": "http://b0.test/tppkg/p1.pkg", "ps3_system_ver": "03.40"},
        {"version": "01.02", "size": "6", "url": "http://b0.test/tppkg/p2.pkg", "ps3_system_ver": "03.41",
         "title": "Game"},
    ]
    session = FakeSession({
        manifest_url: FakeResponse(make_manifest("BLUS30181", pkgs).encode("utf-8")),
        "http://b0.test/tppkg/p1.pkg": FakeResponse(b"1234"),
        "http://b0.test/tppkg/p2.pkg": FakeResponse(b"123456"),
    })
    target = config.target_dir
    target.mkdir(parents=True)

    def fetch(rec, path):
        return download_package(session, rec.url, path, rec.size)

    def pipeline(policy, ask=None):
        records = parse_manifest(fetch_manifest(session, "BLUS30181", config))
        return run_downloads(records, target, policy, fetch=fetch, ask=ask)

    first = pipeline(OverwritePolicy.ASK, ask=lambda rec, path: "n")
    assert len(first.downloaded) == 2 and first.ok

    downloads_before = sum(1 for c in session.calls if c["url"].endswith(".pkg"))
    second = pipeline(OverwritePolicy.ASK, ask=lambda rec, path: "n")
    assert second.downloaded == [] and second.failed == []
    assert len(second.skipped) == 2
    assert sum(1 for c in session.calls if c["url"].endswith(".pkg")) == downloads_before
