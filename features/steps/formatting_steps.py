from __future__ import annotations

import re
from typing import List

from behave import given, then, when

from telefmt import FormattedString, b, fmt, i, parse_markup
from telefmt.models import PAYLOAD_FIELDS, EntityType, MessageEntity


def _entities_from_table(table) -> List[MessageEntity]:
    entities: List[MessageEntity] = []
    for row in table:
        entity_type = EntityType(row["type"])
        data = {"type": entity_type, "offset": int(row["offset"]), "length": int(row["length"])}
        payload = row["payload"].strip()
        field_name = PAYLOAD_FIELDS.get(entity_type)
        if payload and field_name is not None:
            data[field_name] = payload
        entities.append(MessageEntity(**data))
    return entities


def _current(context) -> FormattedString:
    return context.result if context.result is not None else context.formatted


@given('formatted text "{text}"')
def step_formatted_text(context, text: str) -> None:
    context.formatted = FormattedString(text)


@given('formatted text "{text}" with entities:')
def step_formatted_text_with_entities(context, text: str) -> None:
    context.formatted = FormattedString(text, _entities_from_table(context.table))


@when('I parse the markup "{markup}"')
def step_parse_markup(context, markup: str) -> None:
    context.result = parse_markup(markup)


@when('I build formatted text from bold "{first}", plain "{middle}" and italic "{last}"')
def step_build_formatted(context, first: str, middle: str, last: str) -> None:
    context.result = fmt(b, first, b, middle, i, last, i)


@when("I consolidate the formatted text")
def step_consolidate(context) -> None:
    context.result = context.formatted.consolidate()


@when("I slice the formatted text from {start:d} to {end:d}")
def step_slice(context, start: int, end: int) -> None:
    context.result = context.formatted.slice(start, end)


@when('I find "{pattern}"')
def step_find(context, pattern: str) -> None:
    context.result = context.formatted.find(pattern)


@when('I replace bold "{pattern}" with italic "{replacement}"')
def step_replace_bold_with_italic(context, pattern: str, replacement: str) -> None:
    context.result = context.formatted.replace(
        FormattedString.bold(pattern), FormattedString.italic(replacement)
    )


@when('I split on "{separator}"')
def step_split(context, separator: str) -> None:
    context.segments = context.formatted.split(separator)


@then('the text is "{text}"')
def step_text_is(context, text: str) -> None:
    assert _current(context).text == text


@then("the entities are:")
def step_entities_are(context) -> None:
    expected = _entities_from_table(context.table)
    assert _current(context) == FormattedString(_current(context).text, expected)


@then("there are no entities")
def step_no_entities(context) -> None:
    assert _current(context).entities == []


@then("the result equals the formatted text")
def step_result_equals(context) -> None:
    assert context.result == context.formatted


@then("the match offset is {offset:d}")
def step_match_offset(context, offset: int) -> None:
    assert context.result == offset


@then("the segment texts are {texts}")
def step_segment_texts(context, texts: str) -> None:
    expected = re.findall(r'"([^"]*)"', texts)
    assert [segment.text for segment in context.segments] == expected
