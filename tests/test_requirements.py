from dataclasses import dataclass

from papeleo.domain.requirements import PlannedDocument, plan_contractual_documents
from papeleo.domain.result import BatchReport, Err, Ok


@dataclass
class Requirement:
    id: str


def test_plan_is_month_major():
    planned = plan_contractual_documents(
        [Requirement("planilla"), Requirement("informe")], ["enero 2024", "febrero 2024"]
    )
    assert planned == [
        PlannedDocument("planilla", "enero 2024"),
        PlannedDocument("informe", "enero 2024"),
        PlannedDocument("planilla", "febrero 2024"),
        PlannedDocument("informe", "febrero 2024"),
    ]


def test_plan_skips_existing_pairs():
    planned = plan_contractual_documents(
        [Requirement("planilla"), Requirement("informe")],
        ["enero 2024"],
        existing_pairs=[("planilla", "enero 2024")],
    )
    assert planned == [PlannedDocument("informe", "enero 2024")]


def test_plan_without_requirements_or_months_is_empty():
    assert plan_contractual_documents([], ["enero 2024"]) == []
    assert plan_contractual_documents([Requirement("planilla")], []) == []


def test_plan_ignores_repeated_months():
    planned = plan_contractual_documents([Requirement("planilla")], ["enero 2024", "enero 2024"])
    assert planned == [PlannedDocument("planilla", "enero 2024")]


def test_batch_report_records_each_outcome():
    report = BatchReport()
    report.record("RUT", Ok("rd-1"))
    report.record("Cédula", Err("database error"))
    report.record("Póliza", Ok("rd-2"))

    assert report.created == ["rd-1", "rd-2"]
    assert report.failed == [{"item": "Cédula", "error": "database error"}]
    assert report.has_failures
    assert not BatchReport().has_failures
