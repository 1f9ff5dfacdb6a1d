"""Shared test fixtures for engine, extractor and server tests."""
import pytest


WHITE = {'r': 1, 'g': 1, 'b': 1, 'a': 1}
BLUE_500 = {'r': 59 / 255, 'g': 130 / 255, 'b': 246 / 255, 'a': 1}
GRAY_900 = {'r': 17 / 255, 'g': 24 / 255, 'b': 39 / 255, 'a': 1}


# ============================================================================
# Engine inputs
# ============================================================================

@pytest.fixture
def token_set():
    """Design tokens as produced by the extraction stage."""
    return {
        'colors': {
            'Brand/Primary': '#3b82f6',
            'Text/Primary': '#111827',
            'Surface/Muted': 'rgb(243, 244, 246)',
        },
        'typography': {
            'Heading 1': {
                'fontFamily': 'Inter',
                'fontSize': 32,
                'fontWeight': 700,
                'lineHeight': '40px',
                'letterSpacing': 0,
            },
        },
        'spacing': {'Spacing/md': 16, 'Spacing/lg': 24},
        'effects': {
            'Card Shadow': {'offsetX': 0, 'offsetY': 4, 'blur': 8, 'spread': 0, 'color': 'rgba(0, 0, 0, 0.25)'},
        },
        'borderRadius': {'Radius/lg': 8},
        'borderWidth': {'Stroke/thin': 1},
    }


@pytest.fixture
def button_family():
    """Component set with State=Default|Disabled; Disabled adds opacity and a lock icon."""
    base_style = {
        'display': 'flex',
        'alignItems': 'center',
        'padding': '8px 16px',
        'backgroundColor': '#3b82f6',
    }
    label_style = {'color': '#ffffff', 'fontSize': 14}
    return {
        'id': '1:0',
        'name': 'Button',
        'type': 'COMPONENT_SET',
        'children': [
            {
                'id': '1:1',
                'name': 'State=Default',
                'type': 'COMPONENT',
                'style': base_style,
                'children': [
                    {'id': '1:2', 'name': 'Label', 'type': 'TEXT', 'characters': 'Buy now', 'style': label_style},
                ],
            },
            {
                'id': '1:3',
                'name': 'State=Disabled',
                'type': 'COMPONENT',
                'style': {**base_style, 'opacity': 0.5},
                'children': [
                    {'id': '1:4', 'name': 'Label', 'type': 'TEXT', 'characters': 'Unavailable', 'style': label_style},
                    {'id': '1:5', 'name': 'Lock', 'type': 'VECTOR', 'style': {'width': 16, 'height': 16}},
                ],
            },
        ],
    }


@pytest.fixture
def card_node():
    """Plain (non-variant) node tree."""
    return {
        'id': '3:0',
        'name': 'Card',
        'type': 'FRAME',
        'style': {'padding': 16, 'backgroundColor': '#ffffff', 'borderRadius': 8},
        'children': [
            {
                'id': '3:1',
                'name': 'Title',
                'type': 'TEXT',
                'characters': 'Hello',
                'style': {'fontSize': 24, 'fontWeight': 700},
            },
            {
                'id': '3:2',
                'name': 'Body',
                'type': 'TEXT',
                'characters': 'Short copy',
                'style': {'fontSize': 14},
            },
        ],
    }


# ============================================================================
# Figma REST payloads
# ============================================================================

@pytest.fixture
def figma_file():
    """GET /v1/files/:key response with styles and a component set."""
    return {
        'name': 'Design System',
        'document': {
            'id': '0:0',
            'name': 'Document',
            'type': 'DOCUMENT',
            'children': [
                {
                    'id': '0:1',
                    'name': 'Page 1',
                    'type': 'CANVAS',
                    'children': [
                        {
                            'id': '1:1',
                            'name': 'Card',
                            'type': 'FRAME',
                            'absoluteBoundingBox': {'x': 0, 'y': 0, 'width': 320, 'height': 200},
                            'layoutMode': 'VERTICAL',
                            'paddingTop': 16,
                            'paddingRight': 16,
                            'paddingBottom': 16,
                            'paddingLeft': 16,
                            'itemSpacing': 8,
                            'primaryAxisAlignItems': 'SPACE_BETWEEN',
                            'counterAxisAlignItems': 'CENTER',
                            'fills': [{'type': 'SOLID', 'visible': True, 'color': WHITE, 'opacity': 1}],
                            'styles': {'fill': 'S:fill1', 'effect': 'S:effect1'},
                            'cornerRadius': 8,
                            'effects': [{
                                'type': 'DROP_SHADOW',
                                'visible': True,
                                'color': {'r': 0, 'g': 0, 'b': 0, 'a': 0.25},
                                'offset': {'x': 0, 'y': 4},
                                'radius': 8,
                                'spread': 0,
                            }],
                            'children': [
                                {
                                    'id': '1:2',
                                    'name': 'Title',
                                    'type': 'TEXT',
                                    'characters': 'Hello',
                                    'absoluteBoundingBox': {'x': 16, 'y': 16, 'width': 120, 'height': 32},
                                    'layoutSizingHorizontal': 'HUG',
                                    'layoutSizingVertical': 'HUG',
                                    'fills': [{'type': 'SOLID', 'color': GRAY_900}],
                                    'style': {
                                        'fontFamily': 'Inter',
                                        'fontSize': 24,
                                        'fontWeight': 700,
                                        'lineHeightPx': 32,
                                        'lineHeightUnit': 'PIXELS',
                                        'letterSpacing': 0,
                                        'textAlignHorizontal': 'LEFT',
                                    },
                                    'styles': {'text': 'S:text1'},
                                    'boundVariables': {'fills': [{'type': 'VARIABLE_ALIAS', 'id': 'VariableID:1'}]},
                                },
                                {
                                    'id': '1:3',
                                    'name': 'Hero Image',
                                    'type': 'RECTANGLE',
                                    'fills': [{'type': 'IMAGE', 'imageRef': 'img123', 'scaleMode': 'FIT'}],
                                },
                            ],
                        },
                        {
                            'id': '2:0',
                            'name': 'Button',
                            'type': 'COMPONENT_SET',
                            'children': [
                                {
                                    'id': '2:1',
                                    'name': 'State=Default',
                                    'type': 'COMPONENT',
                                    'layoutMode': 'HORIZONTAL',
                                    'paddingTop': 8,
                                    'paddingRight': 16,
                                    'paddingBottom': 8,
                                    'paddingLeft': 16,
                                    'fills': [{'type': 'SOLID', 'color': BLUE_500}],
                                    'children': [{
                                        'id': '2:2',
                                        'name': 'Label',
                                        'type': 'TEXT',
                                        'characters': 'Buy',
                                        'fills': [{'type': 'SOLID', 'color': WHITE}],
                                        'style': {'fontSize': 14, 'fontWeight': 500},
                                    }],
                                },
                                {
                                    'id': '2:3',
                                    'name': 'State=Disabled',
                                    'type': 'COMPONENT',
                                    'layoutMode': 'HORIZONTAL',
                                    'paddingTop': 8,
                                    'paddingRight': 16,
                                    'paddingBottom': 8,
                                    'paddingLeft': 16,
                                    'opacity': 0.5,
                                    'fills': [{'type': 'SOLID', 'color': BLUE_500}],
                                    'children': [{
                                        'id': '2:4',
                                        'name': 'Label',
                                        'type': 'TEXT',
                                        'characters': 'Buy',
                                        'fills': [{'type': 'SOLID', 'color': WHITE}],
                                        'style': {'fontSize': 14, 'fontWeight': 500},
                                    }],
                                },
                            ],
                        },
                    ],
                },
            ],
        },
        'styles': {
            'S:fill1': {'key': 'k1', 'name': 'Surface/White', 'styleType': 'FILL'},
            'S:effect1': {'key': 'k2', 'name': 'Card Shadow', 'styleType': 'EFFECT'},
            'S:text1': {'key': 'k3', 'name': 'Heading/H2', 'styleType': 'TEXT'},
        },
        'components': {
            '2:1': {'key': 'c1', 'name': 'State=Default', 'componentSetId': '2:0'},
            '2:3': {'key': 'c2', 'name': 'State=Disabled', 'componentSetId': '2:0'},
        },
        'componentSets': {
            '2:0': {'key': 'cs1', 'name': 'Button'},
        },
    }


@pytest.fixture
def figma_variables():
    """GET /v1/files/:key/variables/local response."""
    return {
        'status': 200,
        'error': False,
        'meta': {
            'variableCollections': {
                'VariableCollectionId:1': {'name': 'Brand', 'defaultModeId': '1:0'},
            },
            'variables': {
                'VariableID:1': {
                    'name': 'text/primary',
                    'resolvedType': 'COLOR',
                    'variableCollectionId': 'VariableCollectionId:1',
                    'valuesByMode': {'1:0': GRAY_900},
                },
                'VariableID:2': {
                    'name': 'radius/md',
                    'resolvedType': 'FLOAT',
                    'variableCollectionId': 'VariableCollectionId:1',
                    'valuesByMode': {'1:0': 6},
                },
                'VariableID:3': {
                    'name': 'space/lg',
                    'resolvedType': 'FLOAT',
                    'variableCollectionId': 'VariableCollectionId:1',
                    'valuesByMode': {'1:0': 24},
                },
                'VariableID:4': {
                    'name': 'stroke/width',
                    'resolvedType': 'FLOAT',
                    'variableCollectionId': 'VariableCollectionId:1',
                    'valuesByMode': {'1:0': 2},
                },
                'VariableID:5': {
                    'name': 'text/alias',
                    'resolvedType': 'COLOR',
                    'variableCollectionId': 'VariableCollectionId:1',
                    'valuesByMode': {'1:0': {'type': 'VARIABLE_ALIAS', 'id': 'VariableID:1'}},
                },
            },
        },
    }


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Point the options file at an empty temp directory."""
    path = tmp_path / 'config.json'
    monkeypatch.setenv('TAILWIND_CODEGEN_CONFIG', str(path))
    return path
