# ps3upd/core/config.py
from __future__ import annotations
import json
import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, FrozenSet, Optional

logger = logging.getLogger(__name__)

# ---- fixed data --------------------------------------------------------------
DEFAULT_MANIFEST_URL = (
    "https://a0.ww.np.dl.playstation.net/tpl/np/{title_id}/{title_id}-ver.xml"
)
UA = "PS3-Update-CLI/1.0"

# Disc (B*) and network (NP*) title prefixes, by platform/region.
KNOWN_PREFIXES: FrozenSet[str] = frozenset({
    "BCAS", "BCES", "BCJB", "BCJS", "BCKS", "BCUS",
    "BLAS", "BLES", "BLJM", "BLJS", "BLKS", "BLUS",
    "NPEA", "NPEB", "NPEZ", "NPHA", "NPHB", "NPIA",
    "NPJA", "NPJB", "NPKA", "NPKB", "NPUA", "NPUB", "NPUZ",
})

OVERWRITE_CHOICES = ("ask", "all", "skip")

# ---- schema & defaults -------------------------------------------------------
SCHEMA_VERSION = 1
DEFAULT_CFG: Dict[str, Any] = {
    "schema": SCHEMA_VERSION,
    "out_dir": "",         # empty = ~/PS3_Updates
    "verify_tls": False,   # vendor CDN certs chain to a private CA
    "overwrite": "ask",    # ask | all | skip
    "timeout": 30,
}

# ---- locations ---------------------------------------------------------------
# Override with env vars:
#   PS3UPD_CONFIG=<full path to config.json>
#   PS3UPD_DIR=<directory to place config.json>
def _windows_roaming_dir() -> Path:
    return Path(os.environ.get("APPDATA", Path.home() / "AppData/Roaming"))

def _xdg_config_home() -> Path:
    return Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))

def default_target_dir() -> Path:
    return Path.home() / "PS3_Updates"

def config_dir() -> Path:
    env_dir = os.environ.get("PS3UPD_DIR")
    if env_dir:
        return Path(env_dir).expanduser().resolve()
    if os.name == "nt":
        return (_windows_roaming_dir() / "PS3_Updates").resolve()
    return (_xdg_config_home() / "ps3upd").resolve()

def config_path() -> Path:
    env_path = os.environ.get("PS3UPD_CONFIG")
    if env_path:
        p = Path(env_path).expanduser().resolve()
        p.parent.mkdir(parents=True, exist_ok=True)
        return p
    d = config_dir()
    d.mkdir(parents=True, exist_ok=True)
    return d / "config.json"

# ---- load / save -------------------------------------------------------------
def _merge_defaults(cfg: Dict[str, Any]) -> Dict[str, Any]:
    out = DEFAULT_CFG.copy()
    out.update(cfg or {})
    if "schema" not in out:
        out["schema"] = SCHEMA_VERSION
    return out

def load_cfg() -> Dict[str, Any]:
    p = config_path()
    if not p.exists():
        return DEFAULT_CFG.copy()
    try:
        raw = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        # Keep the broken file around as .bad.json and start fresh
        logger.warning("Settings file %s unreadable (%s); using defaults", p, e)
        try:
            p.replace(p.with_suffix(".bad.json"))
        except OSError as move_err:
            logger.debug("Could not move %s aside: %s", p, move_err)
        return DEFAULT_CFG.copy()
    if not isinstance(raw, dict):
        return DEFAULT_CFG.copy()
    return _merge_defaults(raw)

def save_cfg(cfg: Dict[str, Any]) -> Path:
    p = config_path()
    tmp = p.with_suffix(".tmp")
    data = _merge_defaults(cfg)
    # Atomic-ish write
    tmp.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
    if p.exists():
        p.replace(p.with_suffix(".bak.json"))
    tmp.replace(p)
    return p

# ---- runtime config ----------------------------------------------------------
@dataclass(frozen=True)
class AppConfig:
    manifest_url_template: str = DEFAULT_MANIFEST_URL
    known_prefixes: FrozenSet[str] = KNOWN_PREFIXES
    target_dir: Path = default_target_dir()
    verify_tls: bool = False
    timeout: float = 30.0
    user_agent: str = UA
    overwrite: str = "ask"

    def manifest_url(self, title_id: str) -> str:
        return self.manifest_url_template.format(title_id=title_id)

    def with_overrides(self, **changes: Any) -> "AppConfig":
        """Return a copy with every non-None keyword applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})

    def to_cfg(self) -> Dict[str, Any]:
        """Persistable subset, in the settings-file schema."""
        return {
            "out_dir": str(self.target_dir),
            "verify_tls": self.verify_tls,
            "overwrite": self.overwrite,
            "timeout": self.timeout,
        }

    @classmethod
    def from_sources(cls, cfg: Optional[Dict[str, Any]] = None) -> "AppConfig":
        """Defaults, then the settings dict (load_cfg()), then PS3UPD_* env vars."""
        cfg = _merge_defaults(cfg or {})
        out_dir = os.getenv("PS3UPD_OUT_DIR") or cfg.get("out_dir") or ""
        overwrite = str(cfg.get("overwrite") or "ask").lower()
        if overwrite not in OVERWRITE_CHOICES:
            logger.warning("Ignoring unknown overwrite setting %r", overwrite)
            overwrite = "ask"
        return cls(
            manifest_url_template=os.getenv("PS3UPD_MANIFEST_URL", DEFAULT_MANIFEST_URL),
            target_dir=Path(out_dir).expanduser() if out_dir else default_target_dir(),
            verify_tls=_env_bool("PS3UPD_VERIFY_TLS", bool(cfg.get("verify_tls"))),
            timeout=_env_float("PS3UPD_TIMEOUT", positive_float(cfg.get("timeout"), 30.0)),
            overwrite=overwrite,
        )


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def positive_float(raw: Any, default: float) -> float:
    """Parse *raw* as a number > 0; anything else gives *default*."""
    if raw is None or isinstance(raw, bool):
        return default
    try:
        parsed = float(str(raw).strip())
    except ValueError:
        return default
    # rejects nan and inf too
    return parsed if 0 < parsed < float("inf") else default


def _env_float(name: str, default: float) -> float:
    return positive_float(os.getenv(name), default)
