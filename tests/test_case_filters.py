"""
Tests del compilador de filtros de casos.
"""
from datetime import date

from sqlalchemy import select

from app.models.cyber_case import CyberCase
from app.services.case_filters import (
    CaseFilter,
    compile_filter,
    compile_predicates,
    escape_like,
)


def _matching_expedients(db_session, case_filter):
    rows = db_session.execute(
        select(CyberCase.expedient_number)
        .where(compile_filter(case_filter))
        .order_by(CyberCase.expedient_number)
    ).scalars()
    return list(rows)


class TestCaseFilter:

    def test_empty_filter(self):
        case_filter = CaseFilter()

        assert case_filter.is_empty
        assert case_filter.applied() == {}
        assert compile_predicates(case_filter) == []

    def test_empty_strings_are_absent(self):
        """Test: "" en search o crimeType equivale a no filtrar."""
        case_filter = CaseFilter(search="", crime_type="")

        assert case_filter.search is None
        assert case_filter.crime_type is None
        assert case_filter.is_empty

    def test_whitespace_is_kept(self):
        case_filter = CaseFilter(search="  ", crime_type=" Phishing")

        assert case_filter.search == "  "
        assert case_filter.crime_type == " Phishing"
        assert not case_filter.is_empty

    def test_applied_reports_active_filters(self):
        case_filter = CaseFilter(search="exp", date_from=date(2025, 1, 1))

        assert case_filter.applied() == {"search": "exp", "date_from": "2025-01-01"}

    def test_one_predicate_per_filter(self):
        case_filter = CaseFilter(
            search="x",
            crime_type="Phishing",
            date_from=date(2025, 1, 1),
            date_to=date(2025, 12, 31),
        )

        assert len(compile_predicates(case_filter)) == 4


def test_escape_like():
    assert escape_like("50%") == "50\\%"
    assert escape_like("a_b") == "a\\_b"
    assert escape_like("c:\\x") == "c:\\\\x"
    assert escape_like("EXP-0001") == "EXP-0001"


class TestFilterSemantics:
    """Predicados aplicados contra una BD real."""

    def test_search_matches_any_field_case_insensitive(self, db_session, make_case):
        make_case(expedient_number="EXP-A", crime_type="Hacking", victim="Ana")
        make_case(expedient_number="EXP-B", crime_type="Phishing", victim="Luis")
        make_case(expedient_number="EXP-C", crime_type="Malware", victim="PHILIPPE")

        assert _matching_expedients(db_session, CaseFilter(search="phi")) == ["EXP-B", "EXP-C"]
        assert _matching_expedients(db_session, CaseFilter(search="exp-a")) == ["EXP-A"]

    def test_search_treats_wildcards_literally(self, db_session, make_case):
        make_case(expedient_number="EXP_1", victim="Ana")
        make_case(expedient_number="EXPX1", victim="Luis")

        assert _matching_expedients(db_session, CaseFilter(search="EXP_1")) == ["EXP_1"]
        assert _matching_expedients(db_session, CaseFilter(search="%")) == []

    def test_crime_type_is_exact_match(self, db_session, make_case):
        make_case(expedient_number="EXP-1", crime_type="Phishing")
        make_case(expedient_number="EXP-2", crime_type="Phishing avanzado")

        assert _matching_expedients(db_session, CaseFilter(crime_type="Phishing")) == ["EXP-1"]

    def test_date_range_is_inclusive(self, db_session, make_case):
        make_case(expedient_number="EXP-1", case_date=date(2025, 1, 31))
        make_case(expedient_number="EXP-2", case_date=date(2025, 2, 1))
        make_case(expedient_number="EXP-3", case_date=date(2025, 2, 28))
        make_case(expedient_number="EXP-4", case_date=date(2025, 3, 1))

        case_filter = CaseFilter(date_from=date(2025, 2, 1), date_to=date(2025, 2, 28))

        assert _matching_expedients(db_session, case_filter) == ["EXP-2", "EXP-3"]

    def test_open_ended_ranges(self, db_session, make_case):
        make_case(expedient_number="EXP-1", case_date=date(2024, 6, 1))
        make_case(expedient_number="EXP-2", case_date=date(2025, 6, 1))

        assert _matching_expedients(db_session, CaseFilter(date_from=date(2025, 1, 1))) == ["EXP-2"]
        assert _matching_expedients(db_session, CaseFilter(date_to=date(2024, 12, 31))) == ["EXP-1"]

    def test_inverted_range_matches_nothing(self, db_session, make_case):
        make_case(case_date=date(2025, 5, 5))

        case_filter = CaseFilter(date_from=date(2025, 6, 1), date_to=date(2025, 5, 1))

        assert _matching_expedients(db_session, case_filter) == []

    def test_filters_combine_with_and(self, db_session, make_case):
        make_case(expedient_number="EXP-1", crime_type="Phishing", case_date=date(2025, 2, 1))
        make_case(expedient_number="EXP-2", crime_type="Phishing", case_date=date(2024, 2, 1))
        make_case(expedient_number="EXP-3", crime_type="Hacking", case_date=date(2025, 2, 1))

        case_filter = CaseFilter(
            search="exp",
            crime_type="Phishing",
            date_from=date(2025, 1, 1),
        )

        assert _matching_expedients(db_session, case_filter) == ["EXP-1"]

    def test_search_case_insensitive_with_accents(self, db_session, make_case):
        """Test: Mayúsculas/minúsculas con tildes y eñes coinciden."""
        make_case(expedient_number="EXP-1", victim="María López")
        make_case(expedient_number="EXP-2", victim="ÁNGEL RUIZ")
        make_case(expedient_number="EXP-3", crime_type="Fraude cibernético")
        make_case(expedient_number="EXP-4", victim="Íñigo Peña")

        assert _matching_expedients(db_session, CaseFilter(search="MARÍA")) == ["EXP-1"]
        assert _matching_expedients(db_session, CaseFilter(search="ángel")) == ["EXP-2"]
        assert _matching_expedients(db_session, CaseFilter(search="FRAUDE CIBERNÉTICO")) == ["EXP-3"]
        assert _matching_expedients(db_session, CaseFilter(search="PEÑA")) == ["EXP-4"]

    def test_crime_type_does_not_trim(self, db_session, make_case):
        make_case(expedient_number="EXP-1", crime_type="Phishing")

        assert _matching_expedients(db_session, CaseFilter(crime_type=" Phishing")) == []
