"""Tests for PlatformFacade file loading and orchestration."""

import pytest

from audit_platform.config import ConsolidationSettings
from audit_platform.facade import PlatformFacade
from contracts.v1.schemas import ConsolidateRequest


def _finding(id, line, **overrides):
    record = {
        "id": id,
        "title": "Unchecked index",
        "location": {"artifact": "cart.ts", "line": line},
        "severity": "HIGH",
        "category": "security",
    }
    record.update(overrides)
    return record


def test_load_bare_list_uses_file_stem_as_source(write_json):
    path = write_json("logic-analyzer-edge.json", [_finding("1", 42)])

    output = PlatformFacade.load_analyzer_output(path)

    assert output.source == "logic-analyzer-edge"
    assert output.format == "canonical"
    assert len(output.records) == 1


def test_load_object_form_with_format(write_json):
    path = write_json("scan.json", {"source": "semgrep", "format": "flat", "findings": [{"message": "m"}]})

    output = PlatformFacade.load_analyzer_output(path)

    assert output.source == "semgrep"
    assert output.format == "flat"


def test_load_rejects_invalid_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("[{", encoding="utf-8")

    with pytest.raises(ValueError, match="invalid JSON"):
        PlatformFacade.load_analyzer_output(path)


def test_load_rejects_scalar_document(write_json):
    with pytest.raises(ValueError, match="expected a list"):
        PlatformFacade.load_analyzer_output(write_json("n.json", 3))


def test_load_resolutions_accepts_list_or_object(write_json):
    item = {"group_key": "cart.ts:42", "verdict": "CONFIRMED", "reasoning": "Reproduced."}

    as_list = PlatformFacade.load_resolutions(write_json("r1.json", [item]))
    as_object = PlatformFacade.load_resolutions(write_json("r2.json", {"resolutions": [item]}))

    assert as_list == as_object
    assert as_list[0].group_key == "cart.ts:42"


def test_build_request_uses_settings_and_registry():
    facade = PlatformFacade(settings=ConsolidationSettings(
        line_tolerance=2,
        contradiction_predicate="clearance-markers",
        relevant_categories={"SAAS": ["sla"]},
    ))

    req = facade.build_request(
        analyzer_outputs=[],
        context_type="saas",
        audit_type="logic",
        focus=["race", "edge"],
    )

    assert req.options.line_tolerance == 2
    assert req.options.contradiction_predicate == "clearance-markers"
    assert req.options.expected_sources == ["logic-analyzer-edge", "logic-analyzer-race"]
    assert req.context.relevant_categories == ["sla"]


def test_build_request_unknown_audit_type_raises():
    with pytest.raises(ValueError, match="Unknown audit type"):
        PlatformFacade().build_request(analyzer_outputs=[], context_type="GENERAL", audit_type="astrology")


async def test_consolidate_files_runs_in_process(write_json):
    a = write_json("A.json", [_finding("1", 42)])
    b = write_json("B.json", [_finding("1", 42, title="Array never empty", category="invariant")])
    resolutions = write_json("adjudicated.json", [
        {"group_key": "cart.ts:42", "verdict": "FALSE_POSITIVE", "reasoning": "Length checked upstream."},
    ])
    facade = PlatformFacade(settings=ConsolidationSettings(contradiction_predicate="clearance-markers"))

    res = await facade.consolidate_files([a, b], context_type="GENERAL", resolutions_path=resolutions)

    assert res.report.disputes == []
    assert res.report.excluded[0].exclusion_reason == "Length checked upstream."


async def test_consolidate_uses_core_client_when_configured():
    captured = {}

    class _FakeCoreClient:
        def consolidate(self, req):
            captured["req"] = req
            return "remote-response"

    facade = PlatformFacade(core_client=_FakeCoreClient())
    req = ConsolidateRequest()

    assert await facade.consolidate(req) == "remote-response"
    assert captured["req"] is req


def test_analyzer_key_file_name_maps_to_subagent_type(write_json):
    edge = PlatformFacade.load_analyzer_output(write_json("edge.json", [_finding("1", 42)]))
    other = PlatformFacade.load_analyzer_output(write_json("semgrep.json", [_finding("1", 42)]))

    req = PlatformFacade().build_request(
        analyzer_outputs=[edge, other],
        context_type="GENERAL",
        audit_type="logic",
        focus=["edge"],
    )

    assert [o.source for o in req.analyzer_outputs] == ["logic-analyzer-edge", "semgrep"]
    assert req.options.expected_sources == ["logic-analyzer-edge"]


async def test_agreement_matrix_has_one_column_per_analyzer(write_json):
    edge = write_json("edge.json", [_finding("1", 42)])

    res = await PlatformFacade().consolidate_files(
        [edge], context_type="GENERAL", audit_type="logic", focus=["edge"],
    )

    assert res.report.agreement_matrix.sources == ["logic-analyzer-edge"]
