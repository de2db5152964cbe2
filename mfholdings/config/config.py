"""
Config loading and views for mfholdings.

- load_config(path, overrides):  packaged default.yaml <- user YAML <- overrides
- make_view(cfg, "a.b"):         read-only, resolved subtree
- moneycontrol_view(cfg):        filesystem + source-level settings
- http_view(cfg):                page fetcher settings
- extract_view(cfg):             table extraction settings
- reconcile_view(cfg):           reconciliation inputs/outputs
- load_extractor_settings(cfg):  typed `ExtractorSettings`
- load_stop_words(cfg):          frozen stop-word set for name normalization
"""

from __future__ import annotations

from importlib.resources import files
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterable, Mapping, cast

from omegaconf import DictConfig, OmegaConf

from mfholdings.sources.moneycontrol.tables.links import LinkRule
from mfholdings.sources.moneycontrol.tables.parser import (
    ExtractorSettings,
    RowPolicy,
)
from mfholdings.sources.moneycontrol.tables.text import DEFAULT_HEADER_ALIASES

DEFAULT_CONFIG_NAME = "default.yaml"


class ConfigError(RuntimeError):
    pass


def load_config(
    path: Path | None = None, *, overrides: Mapping[str, Any] | None = None
) -> DictConfig:
    """
    Compose the application config.

    Layers, later wins:
      1) packaged `default.yaml`
      2) optional user YAML at `path`
      3) optional `overrides` given as dotted keys, e.g.
         {"sources.moneycontrol.extract.row_policy": "require_holdings"}
    """
    text = files(__package__).joinpath(DEFAULT_CONFIG_NAME).read_text(encoding="utf-8")
    layers = [OmegaConf.create(text)]
    if path is not None:
        layers.append(OmegaConf.load(path))
    if overrides:
        layers.append(
            OmegaConf.from_dotlist([f"{k}={v}" for k, v in overrides.items()])
        )
    return cast(DictConfig, OmegaConf.merge(*layers))


def make_view(cfg: DictConfig, path: str) -> DictConfig:
    """Read-only, fully resolved view of the subtree at dotted `path`."""
    node = OmegaConf.select(cfg, path)
    if not isinstance(node, DictConfig):
        raise ConfigError(f"Missing config node: {path}")
    view = OmegaConf.create(OmegaConf.to_container(node, resolve=True))
    OmegaConf.set_readonly(view, True)
    return view


def moneycontrol_view(cfg: DictConfig) -> DictConfig:
    """Read-only view rooted at `sources.moneycontrol`."""
    return make_view(cfg, "sources.moneycontrol")


def http_view(cfg: DictConfig) -> DictConfig:
    """Read-only view rooted at `sources.moneycontrol.http`."""
    return make_view(cfg, "sources.moneycontrol.http")


def extract_view(cfg: DictConfig) -> DictConfig:
    """Read-only view rooted at `sources.moneycontrol.extract`."""
    return make_view(cfg, "sources.moneycontrol.extract")


def reconcile_view(cfg: DictConfig) -> DictConfig:
    """Read-only view rooted at `reconcile`."""
    return make_view(cfg, "reconcile")


def _must_have(d: DictConfig, path: str, keys: Iterable[str]) -> None:
    missing = [k for k in keys if k not in d]
    if missing:
        raise ConfigError(f"Missing keys at {path}: {', '.join(missing)}")


def ensure_config(cfg: DictConfig) -> None:
    """Raise `ConfigError` if any required key is missing."""
    _must_have(moneycontrol_view(cfg), "sources.moneycontrol", ("root", "runs_dir"))
    _must_have(
        http_view(cfg),
        "sources.moneycontrol.http",
        ("user_agent", "default_timeout"),
    )
    x = extract_view(cfg)
    _must_have(
        x,
        "sources.moneycontrol.extract",
        (
            "ad_marker",
            "scheme_name_key",
            "holdings_key",
            "holdings_table_id",
            "row_policy",
            "link",
        ),
    )
    _must_have(
        x.link,
        "sources.moneycontrol.extract.link",
        ("nav_prefix", "nav_segment", "holdings_segment"),
    )
    _must_have(
        reconcile_view(cfg), "reconcile", ("output_dir", "name_key", "stop_words")
    )


def load_extractor_settings(cfg: DictConfig) -> ExtractorSettings:
    """Build typed, immutable `ExtractorSettings` from `sources.moneycontrol.extract`.

    Raises:
      ConfigError: If `row_policy` is not one of the `RowPolicy` values.
    """
    x = extract_view(cfg)
    try:
        policy = RowPolicy(str(x.row_policy).strip().lower())
    except ValueError as exc:
        raise ConfigError(f"Unknown row_policy: {x.row_policy!r}") from exc

    extra = x.get("header_aliases") or {}
    aliases = dict(DEFAULT_HEADER_ALIASES)
    aliases.update({str(k).strip().lower(): str(v) for k, v in extra.items()})

    return ExtractorSettings(
        ad_marker=str(x.ad_marker),
        scheme_name_key=str(x.scheme_name_key),
        holdings_key=str(x.holdings_key),
        holdings_table_id=str(x.holdings_table_id),
        row_policy=policy,
        header_aliases=MappingProxyType(aliases),
        link_rule=LinkRule(
            nav_prefix=str(x.link.nav_prefix),
            nav_segment=str(x.link.nav_segment),
            holdings_segment=str(x.link.holdings_segment),
        ),
    )


def load_stop_words(cfg: DictConfig) -> frozenset[str]:
    return frozenset(str(w).lower() for w in reconcile_view(cfg).stop_words)


__all__ = [
    "ConfigError",
    "load_config",
    "make_view",
    "moneycontrol_view",
    "http_view",
    "extract_view",
    "reconcile_view",
    "ensure_config",
    "load_extractor_settings",
    "load_stop_words",
]
