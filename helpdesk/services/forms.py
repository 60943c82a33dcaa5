from __future__ import annotations

from typing import Any, Iterable

from helpdesk.schemas import ControlOption, CustomAnswer, CustomField, FieldType, FormControl

PLACEHOLDER_OPTION = ControlOption(value="", label="Select Option...")

CONTROL_KINDS = {
    FieldType.SHORT_TEXT: "text",
    FieldType.DROPDOWN: "select",
    FieldType.MULTIPLE_CHOICE: "radio",
}


def render_control(field: CustomField) -> FormControl:
    options = [ControlOption(value=option, label=option) for option in field.options or []]
    if field.type == FieldType.DROPDOWN:
        options.insert(0, PLACEHOLDER_OPTION)
    return FormControl(
        field_id=field.id,
        label=field.label,
        kind=CONTROL_KINDS[field.type],
        field_type=field.type,
        required=field.required,
        options=options,
    )


def render_controls(fields: Iterable[CustomField]) -> list[FormControl]:
    return [render_control(field) for field in fields]


def apply_answer(custom_data: dict[str, Any], field_id: str, value: Any) -> dict[str, Any]:
    updated = dict(custom_data)
    updated[field_id] = value
    return updated


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def clean_answers(fields: Iterable[CustomField], custom_data: dict[str, Any]) -> dict[str, Any]:
    """
    Keep only answers for fields currently on the form and enforce the
    constraints the rendered controls carry: a required field must be filled,
    and a select/radio answer must be one of the listed options.
    """
    cleaned: dict[str, Any] = {}
    missing: list[str] = []
    for field in fields:
        value = custom_data.get(field.id)
        if isinstance(value, str):
            value = value.strip()
        if _is_blank(value):
            if field.required:
                missing.append(field.label)
            continue
        if field.type != FieldType.SHORT_TEXT and value not in (field.options or []):
            raise ValueError(f"'{value}' is not an option for '{field.label}'")
        cleaned = apply_answer(cleaned, field.id, value)

    if missing:
        raise ValueError(f"Required fields missing: {', '.join(missing)}")
    return cleaned


def rendered_answers(fields: Iterable[CustomField], custom_data: dict[str, Any]) -> list[CustomAnswer]:
    # answers for deleted fields stay on the ticket but have no label to show
    labels = {field.id: field.label for field in fields}
    return [
        CustomAnswer(field_id=field_id, label=labels[field_id], value=value)
        for field_id, value in custom_data.items()
        if field_id in labels
    ]
