# options.py
"""
Runtime option table and resolver.

Workspace options are declared in the workspace file either globally
(``globals``) or on a file script. ``resolve_options`` merges the two sets
and turns them into the ordered flags passed to ``<runtime> run``.

Every option has a kind (how its value is written) and a merge policy:

  - "override": if the script sets the key at all, the script value wins
    (``quiet: false`` on a script turns a global ``quiet: true`` off).
  - "additive": permission sets are unioned by permission name; when both
    sides name the same permission the script value wins.

Output order follows the table below, so the result only depends on the
two input mappings.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from .errors import InvalidOptionError
from .model import CLIArgument, WorkspaceOptions

FLAG = "flag"                    # bool                 -> --name
VALUE = "value"                  # str/int              -> --name=value
LIST = "list"                    # str | list[str]      -> --name=a,b
OPTIONAL = "optional"            # bool | str           -> --name | --name=value
OPTIONAL_LIST = "optional_list"  # bool | str | list    -> --name | --name=a,b
PERMISSIONS = "permissions"      # see _normalize_permissions

OVERRIDE = "override"
ADDITIVE = "additive"

PERMISSION_NAMES: Tuple[str, ...] = (
    "all",
    "env",
    "ffi",
    "hrtime",
    "net",
    "plugin",
    "read",
    "run",
    "sys",
    "write",
)

# Keys that select the script variant, never options.
RESERVED_KEYS = ("file", "command")
NESTED_OPTIONS_KEY = "deno_options"


@dataclass(frozen=True)
class OptionSpec:
    name: str
    flag: str
    kind: str
    merge: str = OVERRIDE
    aliases: Tuple[str, ...] = ()


OPTION_SPECS: Tuple[OptionSpec, ...] = (
    OptionSpec("allow", "--allow", PERMISSIONS, ADDITIVE),
    OptionSpec("deny", "--deny", PERMISSIONS, ADDITIVE),
    OptionSpec("cached_only", "--cached-only", FLAG),
    OptionSpec("cert", "--cert", VALUE),
    OptionSpec("config", "--config", VALUE),
    OptionSpec("import_map", "--import-map", VALUE, aliases=("importmap",)),
    OptionSpec("inspect", "--inspect", OPTIONAL),
    OptionSpec("inspect_brk", "--inspect-brk", OPTIONAL),
    OptionSpec("location", "--location", VALUE),
    OptionSpec("lock", "--lock", OPTIONAL),
    OptionSpec("lock_write", "--lock-write", FLAG),
    OptionSpec("log_level", "--log-level", VALUE),
    OptionSpec("no_check", "--no-check", FLAG),
    OptionSpec("no_remote", "--no-remote", FLAG),
    OptionSpec("quiet", "--quiet", FLAG),
    OptionSpec("reload", "--reload", OPTIONAL_LIST),
    OptionSpec("seed", "--seed", VALUE),
    OptionSpec("unstable", "--unstable", FLAG),
    OptionSpec("v8_flags", "--v8-flags", LIST),
    OptionSpec("watch", "--watch", FLAG),
)

_SPECS_BY_KEY: Dict[str, OptionSpec] = {}
for _spec in OPTION_SPECS:
    _SPECS_BY_KEY[_spec.name] = _spec
    for _alias in _spec.aliases:
        _SPECS_BY_KEY[_alias] = _spec


# Canonical permission value: True (unscoped), False (explicitly off) or a
# tuple of scopes (hosts, paths, ...).
PermissionValue = Union[bool, Tuple[str, ...]]


def _canonical_key(key: str) -> str:
    return str(key).strip().replace("-", "_").lower()


def lookup_option(key: str) -> Optional[OptionSpec]:
    return _SPECS_BY_KEY.get(_canonical_key(key))


# ----------------------------------------------------------------------
# Normalization (validation happens here, at load time)
# ----------------------------------------------------------------------

def _is_str_list(value: Any) -> bool:
    return isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value)


def _strip_blank(values: Any) -> Tuple[str, ...]:
    return tuple(v.strip() for v in values if v.strip())


def _split_scopes(text: str) -> Tuple[str, ...]:
    return _strip_blank(text.split(","))


def _scalar_to_str(value: Any) -> Optional[str]:
    # bool is an int subclass and never a valid scalar value here
    if isinstance(value, bool):
        return None
    if isinstance(value, (str, int, float)):
        return str(value)
    return None


def _normalize_permissions(where: str, spec: OptionSpec, value: Any) -> Dict[str, PermissionValue]:
    if value is None or value is False:
        return {}

    if isinstance(value, str):
        entries: Dict[str, Any] = {value: True}
    elif _is_str_list(value):
        entries = {v: True for v in value}
    elif isinstance(value, Mapping):
        entries = dict(value)
    else:
        raise InvalidOptionError(
            where, spec.name,
            "must be a permission name, a list of names or a mapping of name to scope",
        )

    out: Dict[str, PermissionValue] = {}
    for raw_name, scope in entries.items():
        name = _canonical_key(raw_name)
        if name not in PERMISSION_NAMES:
            raise InvalidOptionError(
                where, spec.name,
                f"has unknown permission '{raw_name}' (expected one of: {', '.join(PERMISSION_NAMES)})",
            )
        # An empty scope grants nothing; it never widens to an unscoped flag.
        if isinstance(scope, bool):
            out[name] = scope
        elif isinstance(scope, str):
            out[name] = _split_scopes(scope) or False
        elif _is_str_list(scope):
            out[name] = _strip_blank(scope) or False
        else:
            raise InvalidOptionError(
                where, spec.name,
                f"has an invalid scope for permission '{name}' (expected true/false, a string or a list)",
            )
    return out


def _normalize_value(where: str, spec: OptionSpec, value: Any) -> Any:
    if spec.kind == PERMISSIONS:
        return _normalize_permissions(where, spec, value)

    if spec.kind == FLAG:
        if not isinstance(value, bool):
            raise InvalidOptionError(where, spec.name, "must be true or false")
        return value

    if spec.kind == VALUE:
        text = _scalar_to_str(value)
        if text is None:
            raise InvalidOptionError(where, spec.name, "must be a string or a number")
        return text

    if spec.kind == LIST:
        if isinstance(value, str):
            return _strip_blank((value,))
        if _is_str_list(value):
            return _strip_blank(value)
        raise InvalidOptionError(where, spec.name, "must be a string or a list of strings")

    if spec.kind == OPTIONAL:
        if isinstance(value, bool):
            return value
        text = _scalar_to_str(value)
        if text is None:
            raise InvalidOptionError(where, spec.name, "must be true, false or a string")
        return text

    if spec.kind == OPTIONAL_LIST:
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return _strip_blank((value,))
        if _is_str_list(value):
            return _strip_blank(value)
        raise InvalidOptionError(where, spec.name, "must be true, false, a string or a list of strings")

    raise ValueError(f"Unknown option kind: {spec.kind!r}")


def normalize_options(options: Optional[Mapping[str, Any]], where: str = "workspace") -> Dict[str, Any]:
    """
    Validate a raw option mapping and return it keyed by canonical name.

    A nested ``deno_options`` mapping is flattened first; inline keys win.
    Keys that select the script variant (``file``/``command``) are skipped.
    Normalizing an already normalized mapping returns an equal mapping.

    Raises:
        InvalidOptionError: unknown option name or a value of the wrong type
    """
    if not options:
        return {}

    raw: Dict[str, Any] = {}
    nested = options.get(NESTED_OPTIONS_KEY)
    if nested is not None:
        if not isinstance(nested, Mapping):
            raise InvalidOptionError(where, NESTED_OPTIONS_KEY, "must be a mapping")
        raw.update(nested)
    raw.update({k: v for k, v in options.items() if k != NESTED_OPTIONS_KEY})

    out: Dict[str, Any] = {}
    for key, value in raw.items():
        if key in RESERVED_KEYS:
            continue
        spec = lookup_option(key)
        if spec is None:
            raise InvalidOptionError(where, str(key), "is not a known runtime option")
        out[spec.name] = _normalize_value(where, spec, value)
    return out


# ----------------------------------------------------------------------
# Merge + CLI rendering
# ----------------------------------------------------------------------

def merge_options(global_options: Mapping[str, Any], local_options: Mapping[str, Any]) -> Dict[str, Any]:
    """Merge two normalized option sets according to each option's merge policy."""
    merged: Dict[str, Any] = dict(global_options)
    for name, value in local_options.items():
        spec = _SPECS_BY_KEY[name]
        if spec.merge == ADDITIVE and name in merged:
            combined = dict(merged[name])
            combined.update(value)
            merged[name] = combined
        else:
            merged[name] = value
    return merged


def _render_permissions(spec: OptionSpec, value: Mapping[str, PermissionValue]) -> List[CLIArgument]:
    out: List[CLIArgument] = []
    for name in PERMISSION_NAMES:
        scope = value.get(name, False)
        if scope is False:
            continue
        flag = f"{spec.flag}-{name}"
        if scope is True:
            out.append(flag)
        else:
            out.append(f"{flag}={','.join(scope)}")
    return out


def _render(spec: OptionSpec, value: Any) -> List[CLIArgument]:
    if spec.kind == PERMISSIONS:
        return _render_permissions(spec, value)
    if value is False or value == "" or value == ():
        return []
    if value is True:
        return [spec.flag]
    if isinstance(value, tuple):
        return [f"{spec.flag}={','.join(value)}"]
    return [f"{spec.flag}={value}"]


def build_cli_arguments(options: Mapping[str, Any]) -> List[CLIArgument]:
    """Render a normalized, merged option set into ordered runtime flags."""
    out: List[CLIArgument] = []
    for spec in OPTION_SPECS:
        if spec.name in options:
            out.extend(_render(spec, options[spec.name]))
    return out


def resolve_options(
    global_options: Optional[WorkspaceOptions],
    local_options: Optional[WorkspaceOptions],
) -> List[CLIArgument]:
    """
    Merge global and script-local options into runtime CLI arguments.

    Example:
        resolve_options({"allow": "net"}, {"allow": ["read"], "quiet": True})
        -> ["--allow-net", "--allow-read", "--quiet"]
    """
    merged = merge_options(
        normalize_options(global_options, "globals"),
        normalize_options(local_options, "script"),
    )
    return build_cli_arguments(merged)
