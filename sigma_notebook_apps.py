"""
sigma_notebook_apps.py

Dash/Plotly interactive applications for finite σ-algebras.
This module provides ready-to-use apps for Jupyter notebooks.

Main components:
- create_sigma_builder_app(): build a collection set by set, check it against
  the σ-algebra axioms, and auto-complete it to σ(F)
- create_generator_app(): choose generators and step through the closure
  process that produces σ(G)
"""

from dash import Dash, dcc, html, Input, Output, State as DashState, ALL, ctx

from sigma_core import (
    FiniteSet, GenerationStep,
    normalize, format_set, contains, remove_set,
    parse_collection, validate, sigma_atoms,
    close_to_sigma_algebra, close_to_sigma_algebra_stepwise,
)
from sigma_visualization import (
    create_hasse_figure, create_universe_figure, create_step_figure,
)


DEFAULT_OMEGA = (1, 2, 3, 4)


# =============================================================================
# Serialization helpers for Dash stores (convert to/from JSON-safe formats)
# =============================================================================

def serialize_set(s):
    """FiniteSet -> list of elements in canonical order."""
    return list(normalize(s))


def deserialize_set(data):
    return FiniteSet(data or [])


def serialize_collection(collection):
    return [serialize_set(s) for s in collection]


def deserialize_collection(data):
    return [deserialize_set(item) for item in (data or [])]


def serialize_step(step):
    """Serialize GenerationStep to JSON-safe dict."""
    return {
        'step_number': step.step_number,
        'kind': step.kind,
        'description': step.description,
        'added_sets': serialize_collection(step.added_sets),
        'current_collection': serialize_collection(step.current_collection),
    }


def deserialize_step(data):
    return GenerationStep(
        data['step_number'],
        data['kind'],
        deserialize_collection(data['added_sets']),
        deserialize_collection(data['current_collection']),
    )


# =============================================================================
# Collection editing helpers
# =============================================================================

def toggle_element(selection, element):
    """Add element to the selection, or remove it if already selected."""
    selection = normalize(selection)
    if element in selection:
        return serialize_set(e for e in selection if e != element)
    return serialize_set(list(selection) + [element])


def add_to_collection(collection, new_sets):
    """
    Append sets not already present.

    Args:
        collection: list of serialized sets (not modified)
        new_sets: iterable of sets

    Returns:
        (new list of serialized sets, number added)
    """
    result = list(collection)
    added = 0
    for s in new_sets:
        if not contains(deserialize_collection(result), s):
            result.append(serialize_set(s))
            added += 1
    return result, added


def parse_text_to_sets(text):
    """
    Parse text input into serialized sets.

    Accepts one set per line, e.g. '{1, 2}' or '1 2'.

    Returns:
        tuple of (list of serialized sets, error_message or None)
    """
    if not text or not text.strip():
        return [], "No sets entered"
    try:
        return serialize_collection(parse_collection(text)), None
    except ValueError as e:
        return [], str(e)


def render_set_chips(collection, removable=False, highlight=None):
    """Inline chips showing sets; removable chips carry a pattern-matching id."""
    if not collection:
        return html.Div("Collection is empty. Start adding sets!",
                        style={'color': 'gray', 'fontStyle': 'italic', 'padding': '10px'})

    highlight = {normalize(s) for s in (highlight or [])}
    chips = []
    for i, s in enumerate(collection):
        s = normalize(s)
        style = {
            'display': 'inline-block', 'margin': '3px', 'padding': '4px 8px',
            'border': '1px solid #ccc', 'borderRadius': '5px', 'fontFamily': 'monospace',
            'backgroundColor': '#ffe5e0' if s in highlight else '#f7f7f7',
        }
        if removable:
            chips.append(html.Button(format_set(s) + "  ✕", id={'type': 'remove-set', 'index': i},
                                     n_clicks=0, title="Remove set",
                                     style=dict(style, cursor='pointer')))
        else:
            chips.append(html.Span(format_set(s), style=style))
    return html.Div(chips, style={'display': 'flex', 'flexWrap': 'wrap'})


def render_validation(collection, omega):
    """Validation panel lines for the current collection."""
    result = validate(collection, omega)
    color = 'darkgreen' if result.is_valid else 'darkred'
    header = "Valid σ-algebra!" if result.is_valid else "Invalid collection"
    items = [html.Li(line) for line in result.messages()]
    if result.is_valid:
        atoms = ", ".join(format_set(a) for a in sigma_atoms(collection))
        items.append(html.Li(f"Atoms: {atoms}"))
    return html.Div([
        html.B(header, style={'color': color}),
        html.Ul(items, style={'fontSize': '12px', 'color': color, 'marginTop': '4px'}),
    ])


BUTTON_STYLE = {'fontSize': '11px', 'margin': '2px'}


# =============================================================================
# σ-Algebra Builder App
# =============================================================================

def create_sigma_builder_app(omega=DEFAULT_OMEGA, collection=None, on_update=None):
    """
    Create interactive σ-algebra builder Dash app.

    Features:
    - Click elements of Ω to build a subset, then add it to the collection
    - Add several sets at once from text (one per line)
    - Remove a set by clicking it
    - Live check of the σ-algebra axioms, listing what is missing
    - Auto-Complete replaces the collection with σ(F)
    - Hasse diagram of the collection ordered by inclusion

    Args:
        omega: the universe
        collection: initial list of sets (will be modified in place)
        on_update: Optional callback function called when the list changes

    Returns:
        Dash app ready to run with app.run(jupyter_mode='inline', ...)
    """
    omega = normalize(omega)
    if collection is None:
        collection = []
    initial = serialize_collection(collection)

    app = Dash(__name__)

    app.layout = html.Div([
        html.H4("σ-Algebra Builder", style={'textAlign': 'center', 'marginBottom': '5px'}),

        html.Div([
            # Left: subset creator and validation
            html.Div([
                dcc.Graph(id='universe-graph', figure=create_universe_figure(omega),
                          config={'displayModeBar': False}),
                html.Div(id='selection-label', children="Selected: ∅",
                         style={'fontFamily': 'monospace', 'fontSize': '12px'}),
                html.Div([
                    html.Button("Add to Collection", id='add-set-btn', n_clicks=0, style=BUTTON_STYLE),
                    html.Button("Clear Selection", id='clear-selection-btn', n_clicks=0, style=BUTTON_STYLE),
                ]),
                dcc.Textarea(id='text-input-area', value='',
                             placeholder="One set per line, e.g. {1, 2}",
                             style={'width': '100%', 'height': '60px', 'fontSize': '11px'}),
                html.Button("Add From Text", id='add-text-btn', n_clicks=0, style=BUTTON_STYLE),
                html.Div([
                    html.Button("Auto-Complete (Generate σ(F))", id='autocomplete-btn', n_clicks=0,
                                style=BUTTON_STYLE),
                    html.Button("Reset Collection", id='reset-btn', n_clicks=0, style=BUTTON_STYLE),
                ], style={'marginTop': '5px'}),
                html.Div(id='status-msg', style={'fontSize': '11px', 'color': '#555', 'marginTop': '5px'}),
                html.Div(id='validation-panel', children=render_validation(initial, omega),
                         style={'marginTop': '8px'}),
            ], style={'width': '360px', 'display': 'inline-block', 'verticalAlign': 'top'}),

            # Right: collection and Hasse diagram
            html.Div([
                html.Div(id='collection-count', children=f"Current collection (F): {len(initial)} sets",
                         style={'fontWeight': 'bold', 'fontSize': '12px'}),
                html.Div(id='collection-container', children=render_set_chips(initial, removable=True)),
                dcc.Graph(id='hasse-graph', figure=create_hasse_figure(deserialize_collection(initial),
                                                                       width=520, height=420),
                          config={'displayModeBar': False}),
            ], style={'display': 'inline-block', 'verticalAlign': 'top', 'marginLeft': '10px'}),
        ]),

        dcc.Store(id='collection-store', data=initial),
        dcc.Store(id='selection-store', data=[]),
    ], style={'padding': '8px', 'maxWidth': '950px'})

    @app.callback(
        [Output('collection-store', 'data'), Output('selection-store', 'data'),
         Output('universe-graph', 'figure'), Output('selection-label', 'children'),
         Output('collection-container', 'children'), Output('collection-count', 'children'),
         Output('validation-panel', 'children'), Output('hasse-graph', 'figure'),
         Output('status-msg', 'children'), Output('text-input-area', 'value')],
        [Input('universe-graph', 'clickData'), Input('add-set-btn', 'n_clicks'),
         Input('clear-selection-btn', 'n_clicks'), Input('add-text-btn', 'n_clicks'),
         Input('autocomplete-btn', 'n_clicks'), Input('reset-btn', 'n_clicks'),
         Input({'type': 'remove-set', 'index': ALL}, 'n_clicks')],
        [DashState('collection-store', 'data'), DashState('selection-store', 'data'),
         DashState('text-input-area', 'value')]
    )
    def update_builder(clickData, add_clicks, clear_clicks, add_text_clicks,
                       autocomplete_clicks, reset_clicks, remove_clicks,
                       sets, selection, text_input):
        triggered = ctx.triggered_id
        status = ""
        sets = list(sets or [])
        selection = list(selection or [])
        text_value = text_input or ""

        # Graph click - toggle element in the subset being built
        if triggered == 'universe-graph' and clickData:
            point = clickData['points'][0]
            if 'customdata' in point:
                selection = toggle_element(selection, point['customdata'])

        elif triggered == 'add-set-btn':
            sets, added = add_to_collection(sets, [selection])
            status = f"Added {format_set(selection)}" if added else f"{format_set(selection)} already in F"
            selection = []

        elif triggered == 'clear-selection-btn':
            selection = []

        elif triggered == 'add-text-btn':
            new_sets, error = parse_text_to_sets(text_input)
            if error:
                status = f"Error: {error}"
            else:
                sets, added = add_to_collection(sets, new_sets)
                status = f"Added {added} sets from text"
                text_value = ""

        elif triggered == 'autocomplete-btn':
            before = len(sets)
            sets = serialize_collection(close_to_sigma_algebra(deserialize_collection(sets), omega))
            status = f"σ(F): {before} -> {len(sets)} sets"

        elif triggered == 'reset-btn':
            sets = []
            selection = []

        # Remove buttons are re-created on every render; only act on a real click
        elif isinstance(triggered, dict) and triggered.get('type') == 'remove-set':
            idx = triggered['index']
            if ctx.triggered[0]['value'] and 0 <= idx < len(sets):
                status = f"Removed {format_set(sets[idx])}"
                sets = serialize_collection(remove_set(deserialize_collection(sets), sets[idx]))

        # Update the external list in place
        collection.clear()
        collection.extend(deserialize_collection(sets))
        if on_update:
            on_update(list(collection))

        return (
            sets, selection,
            create_universe_figure(omega, selection),
            f"Selected: {format_set(selection)}",
            render_set_chips(sets, removable=True),
            f"Current collection (F): {len(sets)} sets",
            render_validation(sets, omega),
            create_hasse_figure(deserialize_collection(sets), width=520, height=420),
            status, text_value,
        )

    return app


# =============================================================================
# σ(G) Generator App
# =============================================================================

def create_generator_app(omega=DEFAULT_OMEGA, generators=None):
    """
    Create interactive σ(G) step-through Dash app.

    Choose generators by clicking elements of Ω (or from text), then press
    'Generate Steps' to compute the closure trace and walk through it with
    'Previous', 'Next Step' and 'Skip to End'. Each frame shows the step
    description, the sets it added and the Hasse diagram of the collection
    at that point.

    Args:
        omega: the universe
        generators: optional initial list of generator sets

    Returns:
        Dash app ready to run with app.run(jupyter_mode='inline', ...)
    """
    omega = normalize(omega)
    initial = serialize_collection(generators or [])

    app = Dash(__name__)

    app.layout = html.Div([
        html.H4("σ(G) Generator", style={'textAlign': 'center', 'marginBottom': '5px'}),

        html.Div([
            html.Div([
                dcc.Graph(id='universe-graph', figure=create_universe_figure(omega),
                          config={'displayModeBar': False}),
                html.Div(id='selection-label', children="Selected: ∅",
                         style={'fontFamily': 'monospace', 'fontSize': '12px'}),
                html.Button("Add Generator", id='add-generator-btn', n_clicks=0, style=BUTTON_STYLE),
                dcc.Textarea(id='text-input-area', value='',
                             placeholder="One generator per line, e.g. {1}",
                             style={'width': '100%', 'height': '60px', 'fontSize': '11px'}),
                html.Button("Add From Text", id='add-text-btn', n_clicks=0, style=BUTTON_STYLE),
                html.Div("Generators (G):", style={'fontWeight': 'bold', 'fontSize': '12px',
                                                   'marginTop': '5px'}),
                html.Div(id='generators-container', children=render_set_chips(initial)),
                html.Div([
                    html.Button("Generate Steps", id='generate-btn', n_clicks=0, style=BUTTON_STYLE),
                    html.Button("Reset", id='reset-btn', n_clicks=0, style=BUTTON_STYLE),
                ], style={'marginTop': '5px'}),
                html.Div(id='status-msg', style={'fontSize': '11px', 'color': '#555', 'marginTop': '5px'}),
            ], style={'width': '360px', 'display': 'inline-block', 'verticalAlign': 'top'}),

            html.Div([
                html.Div([
                    html.Button("← Previous", id='prev-btn', n_clicks=0, style=BUTTON_STYLE),
                    html.Button("Next Step →", id='next-btn', n_clicks=0, style=BUTTON_STYLE),
                    html.Button("Skip to End", id='skip-btn', n_clicks=0, style=BUTTON_STYLE),
                    html.Span(id='step-counter', style={'fontSize': '12px', 'marginLeft': '8px'}),
                ]),
                html.Div(id='step-info', children="Add generators and click \"Generate Steps\" "
                                                  "to see the closure process.",
                         style={'fontSize': '12px', 'margin': '5px 0'}),
                dcc.Graph(id='step-graph', figure=create_hasse_figure([], width=520, height=420),
                          config={'displayModeBar': False}),
            ], style={'display': 'inline-block', 'verticalAlign': 'top', 'marginLeft': '10px'}),
        ]),

        dcc.Store(id='generators-store', data=initial),
        dcc.Store(id='selection-store', data=[]),
        dcc.Store(id='steps-store', data=[]),
        dcc.Store(id='step-idx-store', data=0),
    ], style={'padding': '8px', 'maxWidth': '950px'})

    def render_step(steps, idx):
        if not steps:
            return ("", "Add generators and click \"Generate Steps\" to see the closure process.",
                    create_hasse_figure([], width=520, height=420))
        step = deserialize_step(steps[idx])
        info = [html.B(step.description)]
        if step.added_sets:
            info.append(html.Div("Added:", style={'marginTop': '4px'}))
            info.append(render_set_chips(step.added_sets, highlight=step.added_sets))
        info.append(html.Div(f"Current collection ({len(step.current_collection)} sets):",
                             style={'marginTop': '4px'}))
        info.append(render_set_chips(step.current_collection, highlight=step.added_sets))
        return (f"Step {idx + 1} / {len(steps)}", info,
                create_step_figure(step, total_steps=len(steps), width=520, height=420))

    @app.callback(
        [Output('generators-store', 'data'), Output('selection-store', 'data'),
         Output('steps-store', 'data'), Output('step-idx-store', 'data'),
         Output('universe-graph', 'figure'), Output('selection-label', 'children'),
         Output('generators-container', 'children'), Output('step-counter', 'children'),
         Output('step-info', 'children'), Output('step-graph', 'figure'),
         Output('status-msg', 'children'), Output('text-input-area', 'value')],
        [Input('universe-graph', 'clickData'), Input('add-generator-btn', 'n_clicks'),
         Input('add-text-btn', 'n_clicks'), Input('generate-btn', 'n_clicks'),
         Input('reset-btn', 'n_clicks'), Input('prev-btn', 'n_clicks'),
         Input('next-btn', 'n_clicks'), Input('skip-btn', 'n_clicks')],
        [DashState('generators-store', 'data'), DashState('selection-store', 'data'),
         DashState('steps-store', 'data'), DashState('step-idx-store', 'data'),
         DashState('text-input-area', 'value')]
    )
    def update_generator(clickData, add_clicks, add_text_clicks, generate_clicks, reset_clicks,
                         prev_clicks, next_clicks, skip_clicks,
                         gens, selection, steps, idx, text_input):
        triggered = ctx.triggered_id
        status = ""
        gens = list(gens or [])
        selection = list(selection or [])
        steps = list(steps or [])
        idx = idx or 0
        text_value = text_input or ""

        if triggered == 'universe-graph' and clickData:
            point = clickData['points'][0]
            if 'customdata' in point:
                selection = toggle_element(selection, point['customdata'])

        # Changing the generators invalidates any computed trace
        elif triggered == 'add-generator-btn':
            gens, added = add_to_collection(gens, [selection])
            if added:
                steps, idx = [], 0
            selection = []

        elif triggered == 'add-text-btn':
            new_sets, error = parse_text_to_sets(text_input)
            if error:
                status = f"Error: {error}"
            else:
                gens, added = add_to_collection(gens, new_sets)
                if added:
                    steps, idx = [], 0
                status = f"Added {added} generators from text"
                text_value = ""

        elif triggered == 'generate-btn':
            if gens:
                trace = close_to_sigma_algebra_stepwise(deserialize_collection(gens), omega)
                steps = [serialize_step(s) for s in trace]
                idx = 0
                status = f"{len(steps)} steps"
            else:
                status = "Add at least one generator"

        elif triggered == 'reset-btn':
            gens, selection, steps, idx = [], [], [], 0

        elif triggered == 'prev-btn' and steps:
            idx = max(idx - 1, 0)

        elif triggered == 'next-btn' and steps:
            idx = min(idx + 1, len(steps) - 1)

        elif triggered == 'skip-btn' and steps:
            idx = len(steps) - 1

        counter, info, fig = render_step(steps, idx)

        return (
            gens, selection, steps, idx,
            create_universe_figure(omega, selection),
            f"Selected: {format_set(selection)}",
            render_set_chips(gens),
            counter, info, fig, status, text_value,
        )

    return app
