"""
Annual Return Field Mapper
==========================

Projects an AnnualReturnSnapshot onto the annual-return form as an
ordered list of fields.

Field ids are the section prefix plus an ordinal (``b1``, ``c4``); fields
derived from a list carry a suffix index (``d2_0``, ``d2_1``). Fields whose
preconditions do not hold are left out entirely, so the list length
depends on the snapshot.

Every field carries a display value (currency symbol, thousands
separators, Yes/No) and a copy value: the plain value to paste into the
regulator's form (``"1234.56"``, never ``"£1,234.56"``).

Version: 0.1.0
"""

from collections.abc import Iterable, Sequence
from datetime import date
from typing import Any

from services.compliance_engine.exceptions import InvalidRequestError
from shared.logging import get_logger
from shared.models.annual_return import (
    AnnualReturnSnapshot,
    FieldMapping,
    ReturnSection,
)


logger = get_logger(__name__)


ALL_SECTIONS = "all"
NOT_PROVIDED = "Not provided"

SOURCE_LABELS: dict[str, str] = {
    "donations_legacies": "Donations & Legacies",
    "charitable_activities": "Charitable Activities",
    "other_trading": "Other Trading",
    "investments": "Investments",
    "other": "Other",
}


# =============================================================================
# Formatting
# =============================================================================


def humanize(code: str) -> str:
    """``money_service_business`` -> ``Money Service Business``."""
    return SOURCE_LABELS.get(code) or code.replace("_", " ").title()


def format_currency(amount: float, symbol: str = "£") -> str:
    return f"{symbol}{amount:,.2f}"


def plain_amount(amount: float) -> str:
    return f"{amount:.2f}"


def yes_no(value: bool) -> str:
    return "Yes" if value else "No"


def join_list(values: Iterable[str]) -> str:
    return ", ".join(values)


def _date_values(value: date | None) -> tuple[str, str]:
    if value is None:
        return NOT_PROVIDED, ""
    return value.strftime("%d/%m/%Y"), value.isoformat()


# =============================================================================
# Field Mapper
# =============================================================================


class FieldMapper:
    """
    Builds the annual-return field list for a snapshot.

    Example:
        >>> fields = FieldMapper(currency_symbol="£").map(snapshot)
        >>> [f.field_id for f in fields][:3]
        ['a1', 'a2', 'a3']
    """

    def __init__(self, currency_symbol: str = "£") -> None:
        self.currency_symbol = currency_symbol

    def map(self, snapshot: AnnualReturnSnapshot) -> list[FieldMapping]:
        """Project the snapshot onto form fields, in form order."""
        fields = [
            *self._organisation_fields(snapshot),
            *self._safeguarding_fields(snapshot),
            *self._overseas_fields(snapshot),
            *self._fundraising_fields(snapshot),
        ]
        logger.debug(
            "fields_mapped",
            organization_id=snapshot.organization_id,
            field_count=len(fields),
        )
        return fields

    # -------------------------------------------------------------------------
    # Field builders
    # -------------------------------------------------------------------------

    @staticmethod
    def _field(
        field_id: str,
        section: ReturnSection,
        question: str,
        label: str,
        raw: Any,
        display: str,
        copy: str | None = None,
        required: bool = True,
    ) -> FieldMapping:
        return FieldMapping(
            field_id=field_id,
            section_id=section,
            question_number=question,
            label=label,
            raw_value=raw,
            display_value=display,
            copy_value=display if copy is None else copy,
            required=required,
        )

    def _count(
        self,
        field_id: str,
        section: ReturnSection,
        question: str,
        label: str,
        value: int,
        display: str | None = None,
        required: bool = True,
    ) -> FieldMapping:
        return self._field(
            field_id, section, question, label, value,
            display=display if display is not None else str(value),
            copy=str(value),
            required=required,
        )

    def _money(
        self,
        field_id: str,
        section: ReturnSection,
        question: str,
        label: str,
        amount: float,
        suffix: str = "",
        required: bool = True,
    ) -> FieldMapping:
        return self._field(
            field_id, section, question, label, amount,
            display=format_currency(amount, self.currency_symbol) + suffix,
            copy=plain_amount(amount),
            required=required,
        )

    # -------------------------------------------------------------------------
    # Sections
    # -------------------------------------------------------------------------

    def _organisation_fields(self, snapshot: AnnualReturnSnapshot) -> list[FieldMapping]:
        section = ReturnSection.ORGANISATION
        year_end_display, year_end_copy = _date_values(snapshot.financial_year_end)
        return [
            self._field("a1", section, "A1", "Charity name", snapshot.charity_name, snapshot.charity_name),
            self._field(
                "a2", section, "A2", "Registered charity number",
                snapshot.charity_number,
                display=snapshot.charity_number or NOT_PROVIDED,
                copy=snapshot.charity_number or "",
            ),
            self._field(
                "a3", section, "A3", "Financial year end",
                snapshot.financial_year_end.isoformat() if snapshot.financial_year_end else None,
                display=year_end_display,
                copy=year_end_copy,
            ),
        ]

    def _safeguarding_fields(self, snapshot: AnnualReturnSnapshot) -> list[FieldMapping]:
        section = ReturnSection.SAFEGUARDING
        sg = snapshot.safeguarding
        return [
            self._count("b1", section, "B1", "Total number of staff and volunteers", sg.total_people),
            self._count("b2", section, "B2", "Number working with children", sg.working_with_children),
            self._count(
                "b3", section, "B3", "Number working with vulnerable adults",
                sg.working_with_vulnerable_adults,
            ),
            self._count("b4", section, "B4", "Number with valid DBS checks", sg.checks_valid),
            self._count(
                "b5", section, "B5", "Safeguarding training completed",
                sg.training_completed,
                display=f"{sg.training_completed} staff/volunteers",
            ),
            self._count(
                "b6", section, "B6", "Number with expired DBS checks",
                sg.checks_expired,
                required=False,
            ),
        ]

    def _overseas_fields(self, snapshot: AnnualReturnSnapshot) -> list[FieldMapping]:
        section = ReturnSection.OVERSEAS
        overseas = snapshot.overseas
        has_operations = overseas.has_overseas_operations

        fields = [
            self._field(
                "c1", section, "C1", "Does the charity operate internationally?",
                has_operations,
                display=yes_no(has_operations),
            ),
        ]
        if not has_operations:
            return fields

        country_names = [c.country_name for c in overseas.countries]
        trusted_amount = sum(m.amount for m in overseas.transfer_methods if not m.requires_explanation)
        explained = [m for m in overseas.transfer_methods if m.requires_explanation]

        fields.append(self._money("c2", section, "C2", "Total overseas expenditure", overseas.total_spend))
        fields.append(self._field(
            "c3", section, "C3", "Countries of operation",
            [c.country_code for c in overseas.countries],
            display=join_list(country_names),
        ))
        fields.append(self._money(
            "c4", section, "C4", "Amount sent by bank or wire transfer", trusted_amount,
        ))
        if explained:
            fields.append(self._field(
                "c5", section, "C5", "Non-bank transfer methods used",
                [{"method": m.method, "amount": m.amount} for m in explained],
                display="; ".join(
                    f"{humanize(m.method)}: {format_currency(m.amount, self.currency_symbol)}"
                    for m in explained
                ),
                copy="; ".join(f"{humanize(m.method)}: {plain_amount(m.amount)}" for m in explained),
            ))
        fields.append(self._count(
            "c6", section, "C6", "Number of overseas partners",
            overseas.partners_total,
            required=False,
        ))
        fields.append(self._count(
            "c7", section, "C7", "Partners with verified registration",
            overseas.partners_verified,
            display=f"{overseas.partners_verified} of {overseas.partners_total}",
            required=False,
        ))
        return fields

    def _fundraising_fields(self, snapshot: AnnualReturnSnapshot) -> list[FieldMapping]:
        section = ReturnSection.FUNDRAISING
        fr = snapshot.fundraising

        fields = [self._money("d1", section, "D1", "Total income for the year", fr.total_income)]

        for index, source in enumerate(fr.income_by_source):
            fields.append(self._money(
                f"d2_{index}", section, f"D2.{index + 1}",
                f"Income from {humanize(source.source)}",
                source.amount,
                suffix=f" ({source.percentage:.1f}%)",
            ))

        if fr.highest_corporate_donation is not None:
            fields.append(self._money(
                "d3", section, "D3", "Highest donation from a company",
                fr.highest_corporate_donation,
            ))
        if fr.highest_individual_donation is not None:
            fields.append(self._money(
                "d4", section, "D4", "Highest donation from an individual",
                fr.highest_individual_donation,
            ))

        related = fr.has_related_party_transactions
        fields.append(self._field(
            "d5", section, "D5", "Related party transactions",
            related,
            display=(
                f"Yes - {format_currency(fr.related_party_amount, self.currency_symbol)}"
                if related else "No"
            ),
            copy=yes_no(related),
        ))
        if related:
            fields.append(self._money(
                "d6", section, "D6", "Total related party transactions",
                fr.related_party_amount,
            ))

        fields.append(self._field(
            "d7", section, "D7", "Professional fundraiser used",
            fr.uses_professional_fundraiser,
            display=yes_no(fr.uses_professional_fundraiser),
        ))

        method_labels = [humanize(m) for m in fr.fundraising_methods]
        fields.append(self._field(
            "d8", section, "D8", "Fundraising methods used",
            list(fr.fundraising_methods),
            display=join_list(method_labels) or "None recorded",
            copy=join_list(method_labels),
            required=False,
        ))
        return fields


# =============================================================================
# Section filtering
# =============================================================================


def resolve_section(section_id: ReturnSection | str) -> ReturnSection | None:
    """Parse a section id; ``None`` means all sections."""
    if isinstance(section_id, ReturnSection):
        return section_id
    if section_id == ALL_SECTIONS:
        return None
    try:
        return ReturnSection(section_id)
    except ValueError:
        raise InvalidRequestError(
            f"Unknown section: {section_id}",
            details={
                "section": section_id,
                "valid_sections": [ALL_SECTIONS, *(s.value for s in ReturnSection)],
            },
        ) from None


def filter_fields_by_section(
    fields: Sequence[FieldMapping],
    section_id: ReturnSection | str,
) -> list[FieldMapping]:
    """Fields whose id carries the section's prefix, in original order."""
    section = resolve_section(section_id)
    if section is None:
        return list(fields)
    return [f for f in fields if f.field_id.startswith(section.prefix)]


def group_fields_by_section(
    fields: Sequence[FieldMapping],
) -> dict[ReturnSection, list[FieldMapping]]:
    """Group by id prefix; groups and their fields keep generation order."""
    by_prefix = {section.prefix: section for section in ReturnSection}
    groups: dict[ReturnSection, list[FieldMapping]] = {}
    for field in fields:
        section = by_prefix.get(field.field_id[:1])
        if section is not None:
            groups.setdefault(section, []).append(field)
    return groups
