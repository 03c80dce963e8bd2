"""Tests for per-file import policy evaluation."""

from __future__ import annotations

from importguard.policy import (
    FileIdentity,
    ImportOccurrence,
    PolicyConfig,
    PolicyRule,
    Severity,
    ViolationCode,
    allowed_imports_for,
    evaluate,
)

UI_CONFIG = PolicyConfig(rules=(PolicyRule("src/ui/**", ("react", "./*.css")),))


def _imp(specifier: str, start: int = 0, end: int | None = None) -> ImportOccurrence:
    return ImportOccurrence(specifier, start, start + len(specifier) if end is None else end)


def test_disallowed_import_lists_allowed_patterns() -> None:
    out = evaluate(UI_CONFIG, FileIdentity("src/ui/Button.ts"), [ImportOccurrence("lodash", 10, 17)])
    assert len(out) == 1
    v = out[0]
    assert v.code == ViolationCode.DISALLOWED
    assert v.severity == Severity.ERROR
    assert (v.file_id, v.range_start, v.range_end) == ("src/ui/Button.ts", 10, 17)
    assert "react" in v.message and "./*.css" in v.message
    assert v.message == "Import not allowed. Only imports below allowed from this file: \nreact, \n./*.css\n"
    assert v.source == "importguard"


def test_allowed_relative_import_is_silent() -> None:
    assert evaluate(UI_CONFIG, FileIdentity("src/ui/Button.ts"), [_imp("./Button.css", 20)]) == []


def test_no_rules_reports_unconfigured() -> None:
    out = evaluate(PolicyConfig(rules=()), FileIdentity("src/other/x.ts"), [ImportOccurrence("anything", 0, 8)])
    assert len(out) == 1
    assert out[0].code == ViolationCode.UNCONFIGURED
    assert "No imports specified for current file" in out[0].message


def test_file_outside_every_rule_reports_unconfigured() -> None:
    out = evaluate(UI_CONFIG, FileIdentity("src/api/views.py"), [_imp("react")])
    assert [v.code for v in out] == [ViolationCode.UNCONFIGURED]


def test_empty_allow_list_is_treated_as_unconfigured() -> None:
    config = PolicyConfig(rules=(PolicyRule("*", ()),))
    out = evaluate(config, FileIdentity("x.ts"), [_imp("react"), _imp("./x")])
    assert [v.code for v in out] == [ViolationCode.UNCONFIGURED, ViolationCode.UNCONFIGURED]


def test_unknown_position_is_skipped() -> None:
    for config in (UI_CONFIG, PolicyConfig()):
        out = evaluate(config, FileIdentity("src/ui/Button.ts"), [ImportOccurrence("lodash", -1, -1)])
        assert out == []


def test_overlapping_rules_are_unioned() -> None:
    config = PolicyConfig(
        rules=(
            PolicyRule("src/**", ("json",)),
            PolicyRule("src/ui/**", ("react",)),
        )
    )
    file = FileIdentity("src/ui/view.py")
    assert allowed_imports_for(config, file.path) == ["json", "react"]
    assert evaluate(config, file, [_imp("json"), _imp("react")]) == []
    out = evaluate(config, file, [_imp("lodash")])
    assert out[0].code == ViolationCode.DISALLOWED
    assert "json" in out[0].message and "react" in out[0].message


def test_duplicate_patterns_are_kept_in_rule_order() -> None:
    config = PolicyConfig(rules=(PolicyRule("a/**", ("x", "y")), PolicyRule("a/*", ("x",))))
    assert allowed_imports_for(config, "a/m.py") == ["x", "y", "x"]


def test_output_follows_input_order() -> None:
    imports = [_imp("c", 30), _imp("json", 0), _imp("a", 10), ImportOccurrence("b", -1, -1), _imp("b", 20)]
    config = PolicyConfig(rules=(PolicyRule("**", ("json",)),))
    out = evaluate(config, FileIdentity("m.py"), imports)
    assert [v.range_start for v in out] == [30, 10, 20]


def test_evaluate_is_idempotent() -> None:
    imports = [_imp("lodash", 5), _imp("react", 15), _imp("fs", 25)]
    first = evaluate(UI_CONFIG, FileIdentity("src/ui/Button.ts"), imports)
    second = evaluate(UI_CONFIG, FileIdentity("src/ui/Button.ts"), imports)
    assert first == second
    assert len(first) == 2


def test_malformed_patterns_match_nothing_without_raising() -> None:
    config = PolicyConfig(rules=(PolicyRule("src/**", ("[", "{unclosed", "a[z-", "\\")),))
    out = evaluate(config, FileIdentity("src/m.py"), [_imp("react")])
    assert [v.code for v in out] == [ViolationCode.DISALLOWED]

    broken_file_rule = PolicyConfig(rules=(PolicyRule("[src/**", ("react",)),))
    out = evaluate(broken_file_rule, FileIdentity("src/m.py"), [_imp("react")])
    assert [v.code for v in out] == [ViolationCode.UNCONFIGURED]


def test_reversed_range_is_clamped_to_empty() -> None:
    out = evaluate(PolicyConfig(), FileIdentity("m.py"), [ImportOccurrence("x", 12, 4)])
    assert (out[0].range_start, out[0].range_end, out[0].length) == (12, 12, 0)


def test_source_name_comes_from_config() -> None:
    config = PolicyConfig(rules=(), name="boundaries")
    out = evaluate(config, FileIdentity("m.py"), [_imp("os")])
    assert out[0].source == "boundaries"
    assert out[0].to_dict()["source"] == "boundaries"
    assert out[0].to_dict()["code"] == 1


def test_from_imports_keeps_mapping_order() -> None:
    config = PolicyConfig.from_imports({"b/**": ["x"], "a/**": ["y", "z"]}, name="n")
    assert [r.file_pattern for r in config.rules] == ["b/**", "a/**"]
    assert config.rules[1].allowed_import_patterns == ("y", "z")
    assert config.name == "n"


def test_oversized_patterns_allow_nothing() -> None:
    config = PolicyConfig.from_imports({"**/**/**/**": ["pkg{1..300000}", "{a,b}" * 20]})
    (violation,) = evaluate(config, FileIdentity("src/app/main.py"), [_imp("pkg5")])
    assert violation.code == ViolationCode.DISALLOWED
