from __future__ import annotations

import pytest

from denox.errors import InvalidOptionError
from denox.options import (
    OPTION_SPECS,
    build_cli_arguments,
    merge_options,
    normalize_options,
    resolve_options,
)


def test_empty_inputs_resolve_to_no_arguments() -> None:
    assert resolve_options(None, None) == []
    assert resolve_options({}, {}) == []


def test_allow_list_renders_one_flag_per_permission() -> None:
    assert resolve_options({}, {"allow": ["net"]}) == ["--allow-net"]
    assert resolve_options({}, {"allow": ["write", "net"]}) == ["--allow-net", "--allow-write"]


def test_allow_is_additive_across_global_and_script() -> None:
    assert resolve_options({"allow": "net"}, {"allow": "read"}) == ["--allow-net", "--allow-read"]


def test_script_scope_overrides_global_scope_for_same_permission() -> None:
    args = resolve_options(
        {"allow": {"net": ["example.com"]}},
        {"allow": {"net": ["localhost:8080", "deno.land"]}},
    )
    assert args == ["--allow-net=localhost:8080,deno.land"]


def test_script_can_drop_a_global_permission() -> None:
    assert resolve_options({"allow": ["net", "read"]}, {"allow": {"net": False}}) == ["--allow-read"]


def test_permission_scope_string_is_split_on_commas() -> None:
    assert resolve_options({}, {"allow": {"read": "./data, ./tmp"}}) == ["--allow-read=./data,./tmp"]


@pytest.mark.parametrize("scope", [[], "", " , ", [" "]])
def test_empty_permission_scope_grants_nothing(scope) -> None:
    assert resolve_options({}, {"allow": {"net": scope}}) == []
    assert resolve_options({}, {"deny": {"read": scope}}) == []


def test_empty_script_scope_drops_global_permission() -> None:
    assert resolve_options({"allow": ["net", "env"]}, {"allow": {"net": []}}) == ["--allow-env"]


@pytest.mark.parametrize(
    "options",
    [
        {"reload": ""},
        {"reload": []},
        {"reload": [""]},
        {"v8_flags": ""},
        {"v8_flags": ["", "  "]},
        {"inspect": ""},
        {"config": ""},
    ],
)
def test_blank_values_render_no_flag(options) -> None:
    assert resolve_options({}, options) == []


def test_blank_list_entries_are_dropped() -> None:
    assert resolve_options({}, {"v8_flags": ["", "--expose-gc"]}) == ["--v8-flags=--expose-gc"]


def test_deny_renders_like_allow() -> None:
    assert resolve_options({}, {"deny": {"net": ["evil.com"]}}) == ["--deny-net=evil.com"]


def test_value_option_is_overridden_by_script() -> None:
    args = resolve_options({"import_map": "global.json"}, {"import_map": "local.json"})
    assert args == ["--import-map=local.json"]


def test_script_false_turns_off_global_flag() -> None:
    assert resolve_options({"quiet": True}, {"quiet": False}) == []


def test_global_options_apply_when_script_is_silent() -> None:
    assert resolve_options({"unstable": True, "log_level": "debug"}, {}) == [
        "--log-level=debug",
        "--unstable",
    ]


def test_output_follows_table_order_not_input_order() -> None:
    local = {"watch": True, "v8_flags": ["--max-old-space-size=4096"], "allow": ["env"], "config": "deno.json"}
    assert resolve_options({}, local) == [
        "--allow-env",
        "--config=deno.json",
        "--v8-flags=--max-old-space-size=4096",
        "--watch",
    ]


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (True, ["--inspect"]),
        ("127.0.0.1:9229", ["--inspect=127.0.0.1:9229"]),
        (False, []),
    ],
)
def test_optional_value_option(value, expected) -> None:
    assert resolve_options({}, {"inspect": value}) == expected


def test_reload_accepts_flag_or_list() -> None:
    assert resolve_options({}, {"reload": True}) == ["--reload"]
    assert resolve_options({}, {"reload": ["https://deno.land/std"]}) == ["--reload=https://deno.land/std"]


def test_seed_accepts_numbers() -> None:
    assert resolve_options({}, {"seed": 42}) == ["--seed=42"]


def test_dash_and_alias_keys_are_accepted() -> None:
    assert resolve_options({}, {"import-map": "a.json"}) == ["--import-map=a.json"]
    assert resolve_options({}, {"importmap": "b.json"}) == ["--import-map=b.json"]
    assert resolve_options({}, {"cached-only": True}) == ["--cached-only"]


def test_nested_deno_options_are_flattened_and_inline_wins() -> None:
    local = {"deno_options": {"allow": ["net"], "log_level": "info"}, "log_level": "debug"}
    assert resolve_options({}, local) == ["--allow-net", "--log-level=debug"]


def test_file_and_command_keys_are_not_options() -> None:
    assert normalize_options({"file": "main.ts", "quiet": True}) == {"quiet": True}


def test_unknown_option_is_rejected() -> None:
    with pytest.raises(InvalidOptionError) as exc_info:
        normalize_options({"allow_everything": True}, where="script 'x'")
    assert exc_info.value.option == "allow_everything"
    assert "script 'x'" in str(exc_info.value)


@pytest.mark.parametrize(
    "options",
    [
        {"quiet": "yes"},
        {"import_map": True},
        {"v8_flags": 3},
        {"allow": ["network"]},
        {"allow": 1},
        {"allow": {"net": 5}},
        {"deno_options": ["allow"]},
    ],
)
def test_ill_typed_values_are_rejected(options) -> None:
    with pytest.raises(InvalidOptionError):
        normalize_options(options)


def test_normalize_is_idempotent() -> None:
    raw = {"allow": {"net": "a.com"}, "v8_flags": "--x", "reload": "mod", "seed": 1}
    once = normalize_options(raw)
    assert normalize_options(once) == once


def test_merge_does_not_mutate_inputs() -> None:
    g = normalize_options({"allow": ["net"]})
    local = normalize_options({"allow": ["read"]})
    merge_options(g, local)
    assert g == {"allow": {"net": True}}
    assert local == {"allow": {"read": True}}


def test_every_option_renders_when_enabled() -> None:
    for spec in OPTION_SPECS:
        if spec.kind == "permissions":
            value = {"all": True}
        elif spec.kind in ("flag", "optional", "optional_list"):
            value = True
        elif spec.kind == "list":
            value = ("x",)
        else:
            value = "x"
        rendered = build_cli_arguments({spec.name: value})
        assert rendered and rendered[0].startswith(spec.flag)
