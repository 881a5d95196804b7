from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from gemini_client import UserInputError
from gemini_client.models import (
    Content,
    FunctionCallPart,
    FunctionResponsePart,
    GenerateContentRequest,
    GenerationConfig,
    GenerationParams,
    InlineDataPart,
    ModelParams,
    TextPart,
)
from gemini_client.services.params import (
    build_generate_content_body,
    format_generate_content_input,
    format_new_content,
    normalize_model_name,
    resolve_params,
    validate_chat_history,
)


@pytest.mark.parametrize(
    'name,expected',
    [
        ('my-model', 'models/my-model'),
        ('models/my-model', 'models/my-model'),
        ('tunedModels/my-model', 'tunedModels/my-model'),
    ],
)
def test_normalize_model_name(name: str, expected: str) -> None:
    assert normalize_model_name(name) == expected
    assert normalize_model_name(normalize_model_name(name)) == expected


def test_override_replaces_tool_config_whole() -> None:
    defaults = GenerationParams(
        toolConfig={'functionCallingConfig': {'mode': 'ANY', 'allowedFunctionNames': ['a', 'b']}},
        generationConfig={'temperature': 0.1, 'topK': 3},
    )
    overrides = GenerationParams(
        toolConfig={'functionCallingConfig': {'mode': 'AUTO'}},
        generationConfig={'maxOutputTokens': 10},
    )

    resolved = resolve_params(defaults, overrides)

    assert resolved.toolConfig == overrides.toolConfig
    assert resolved.toolConfig.functionCallingConfig.allowedFunctionNames is None
    assert resolved.generationConfig.model_dump(exclude_none=True) == {'maxOutputTokens': 10}


def test_missing_overrides_fall_back_to_defaults() -> None:
    defaults = GenerationParams(
        tools=[{'functionDeclarations': [{'name': 'myfunc'}]}],
        safetySettings=[{'category': 'HARM_CATEGORY_HARASSMENT', 'threshold': 'BLOCK_NONE'}],
        systemInstruction='be friendly',
    )
    resolved = resolve_params(defaults, GenerationParams(tools=[{'functionDeclarations': [{'name': 'other'}]}]))

    assert [d.name for d in resolved.tools[0].functionDeclarations] == ['other']
    assert resolved.safetySettings == defaults.safetySettings
    assert resolved.systemInstruction == defaults.systemInstruction
    assert resolved.toolConfig is None
    assert resolve_params(defaults, None) == defaults


def test_model_params_fields_act_as_defaults() -> None:
    params = ModelParams(model='m', generationConfig={'temperature': 0.5})
    resolved = resolve_params(params, None)
    assert type(resolved) is GenerationParams
    assert resolved.generationConfig.temperature == 0.5


@pytest.mark.parametrize(
    'value',
    [
        'be formal',
        TextPart(text='be formal'),
        ['be formal'],
        {'parts': [{'text': 'be formal'}]},
    ],
)
def test_system_instruction_normalization(value) -> None:
    params = GenerationParams(systemInstruction=value)
    assert params.systemInstruction == Content(role='system', parts=[TextPart(text='be formal')])


@pytest.mark.parametrize(
    'value',
    [
        Content(role='user', parts=[TextPart(text='be formal')]),
        {'role': 'model', 'parts': [{'text': 'be formal'}]},
    ],
)
def test_system_instruction_role_is_always_system(value) -> None:
    params = GenerationParams(systemInstruction=value)
    assert params.systemInstruction.role == 'system'
    assert params.systemInstruction.parts[0].text == 'be formal'


def test_resolved_params_do_not_share_nested_values() -> None:
    config = GenerationConfig(temperature=0.1)
    defaults = GenerationParams(generationConfig=config)

    resolved = resolve_params(defaults, None)
    config.temperature = 0.9

    assert resolved.generationConfig.temperature == 0.1
    assert resolved.generationConfig is not defaults.generationConfig


def test_part_is_a_tagged_union() -> None:
    content = Content.model_validate(
        {
            'role': 'model',
            'parts': [
                {'text': 'hi'},
                {'inlineData': {'mimeType': 'image/png', 'data': 'AAAA'}},
                {'functionCall': {'name': 'f', 'args': {'x': 1}}},
                {'functionResponse': {'name': 'f', 'response': {'y': 2}}},
            ],
        }
    )
    assert [type(part) for part in content.parts] == [
        TextPart,
        InlineDataPart,
        FunctionCallPart,
        FunctionResponsePart,
    ]


@pytest.mark.parametrize('part', [{}, {'text': 'a', 'functionCall': {'name': 'f'}}])
def test_part_requires_exactly_one_payload(part) -> None:
    with pytest.raises(ValidationError, match='exactly one of'):
        Content.model_validate({'role': 'user', 'parts': [part]})


def test_format_new_content_from_string() -> None:
    assert format_new_content('hello') == Content(role='user', parts=[TextPart(text='hello')])
    assert format_new_content('   ') == Content(role='user', parts=[TextPart(text='   ')])


def test_format_new_content_from_mixed_list() -> None:
    image = InlineDataPart(inlineData={'mimeType': 'image/png', 'data': 'AAAA'})
    content = format_new_content(['describe', image])
    assert content.role == 'user'
    assert content.parts == [TextPart(text='describe'), image]


def test_function_responses_use_function_role() -> None:
    content = format_new_content([{'functionResponse': {'name': 'f', 'response': {'ok': True}}}])
    assert content.role == 'function'


def test_function_responses_cannot_be_mixed() -> None:
    with pytest.raises(UserInputError, match='FunctionResponse cannot be mixed'):
        format_new_content(['text', {'functionResponse': {'name': 'f', 'response': {}}}])


def test_format_generate_content_input() -> None:
    request = format_generate_content_input('hello')
    assert request.contents == [Content(role='user', parts=[TextPart(text='hello')])]

    full = format_generate_content_input(
        {'contents': [{'role': 'user', 'parts': [{'text': 'x'}]}], 'systemInstruction': 'be formal'}
    )
    assert isinstance(full, GenerateContentRequest)
    assert full.systemInstruction.role == 'system'


def test_body_contains_effective_params_only() -> None:
    params = GenerationParams(
        tools=[{'functionDeclarations': [{'name': 'myfunc', 'parameters': {'type': 'OBJECT', 'properties': {}}}]}],
        toolConfig={'functionCallingConfig': {'mode': 'NONE'}},
    )
    body = json.loads(build_generate_content_body([format_new_content('hi')], params))
    assert body == {
        'contents': [{'role': 'user', 'parts': [{'text': 'hi'}]}],
        'tools': [{'functionDeclarations': [{'name': 'myfunc', 'parameters': {'type': 'OBJECT', 'properties': {}}}]}],
        'toolConfig': {'functionCallingConfig': {'mode': 'NONE'}},
    }


def test_valid_history() -> None:
    history = validate_chat_history(
        [
            {'role': 'user', 'parts': [{'text': 'what is the weather'}]},
            {'role': 'model', 'parts': [{'functionCall': {'name': 'weather', 'args': {}}}]},
            {'role': 'function', 'parts': [{'functionResponse': {'name': 'weather', 'response': {'t': 20}}}]},
            {'role': 'model', 'parts': [{'text': 'it is 20 degrees'}]},
        ]
    )
    assert [content.role for content in history] == ['user', 'model', 'function', 'model']
    assert validate_chat_history(None) == []


@pytest.mark.parametrize(
    'history,message',
    [
        ([{'role': 'model', 'parts': [{'text': 'hi'}]}], "First content should be with role 'user'"),
        ([{'role': 'system', 'parts': [{'text': 'hi'}]}], 'Role should be one of'),
        (
            [{'role': 'user', 'parts': [{'text': 'a'}]}, {'role': 'user', 'parts': [{'text': 'b'}]}],
            "can't follow 'user'",
        ),
        ([{'role': 'user', 'parts': []}], 'must have parts'),
        (
            [{'role': 'user', 'parts': [{'functionCall': {'name': 'f', 'args': {}}}]}],
            "can't contain 'functionCall' part",
        ),
    ],
)
def test_invalid_history(history, message: str) -> None:
    with pytest.raises(UserInputError, match=message):
        validate_chat_history(history)


@pytest.mark.parametrize(
    'history',
    [
        [{'role': 'user', 'parts': [{'bogus': 'x'}]}],
        [{'role': 'user', 'parts': 'not a list'}],
    ],
)
def test_malformed_history_is_a_user_input_error(history) -> None:
    with pytest.raises(UserInputError, match='Invalid chat history') as exc_info:
        validate_chat_history(history)
    assert isinstance(exc_info.value.__cause__, ValidationError)


def test_format_new_content_copies_its_input() -> None:
    message = Content(parts=[TextPart(text='hi')])
    part = TextPart(text='yo')

    formatted = format_new_content(message)
    from_parts = format_new_content([part])

    assert formatted == message
    assert formatted is not message
    assert formatted.parts[0] is not message.parts[0]
    assert from_parts.parts[0] is not part
