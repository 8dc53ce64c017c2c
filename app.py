import base64
import os

import dash
import dash_bootstrap_components as dbc
from dash import dcc, html, Input, Output, State, ctx, ALL
from dash.exceptions import PreventUpdate

from sustained import constants
from sustained.axis_mapping import preset_options
from sustained.chart import SustainedSpeedChart
from sustained.constants import (
    COLORS,
    DEFAULT_CANVAS_HEIGHT,
    DEFAULT_M,
    DEFAULT_RHO,
    DEFAULT_S,
    FRAME_INTERVAL_MS,
    VISIBILITY,
)
from sustained.datasets import DatasetParseError, dprint

# Toggle for console debug logging
constants.DEBUG_LOG = os.environ.get("SSCHART_DEBUG", "1") == "1"

# ✅ One chart session per server process
print("[BOOT] Generating reference grid...")
chart = SustainedSpeedChart()
print(f"[BOOT] Generated {len(chart.grid.curves)} curves")

# ✅ Initialize Dash app
app = dash.Dash(__name__, external_stylesheets=[dbc.themes.BOOTSTRAP], suppress_callback_exceptions=True)
server = app.server
app.title = "Sustained Speed Chart"


COLOR_LABELS = {
    "lift": "CL lines",
    "drag": "CD lines",
    "horizontal": "VXS lines",
    "vertical": "VYS lines",
    "inner_speed": "Inner speed grid",
    "glide1": "1:1 glide",
    "glide2": "2:1 glide",
    "glide3": "3:1 glide",
    "background": "Background",
    "legend": "Legend text",
}

VISIBILITY_LABELS = {
    "show_lift": "CL lines",
    "show_drag": "CD lines",
    "show_horizontal": "VXS lines",
    "show_vertical": "VYS lines",
    "show_inner_speed_grid": "Inner speed grid",
    "show_glide": "Glide rays",
    "show_inner_coeff_labels": "Extended coefficient labels",
    "show_outer_coeff_labels": "Coefficient labels",
    "show_speed_labels": "Speed labels",
    "show_glide_labels": "Glide labels",
}


def create_field_row(label, component):
    """Helper to create a consistent field row"""
    return html.Div([
        html.Label(label, style={"fontWeight": "600", "fontSize": "13px", "marginBottom": "2px"}),
        component
    ], style={"marginBottom": "10px"})


def parameter_input(input_id, value, step):
    return dcc.Input(id=input_id, type="number", value=value, step=step, min=0, debounce=True,
                     style={"width": "100%"})


def dataset_rows(datasets):
    """One row per loaded dataset: colour picker, visibility, remove."""
    if not datasets:
        return html.Div("No datasets loaded", style={"fontSize": "12px", "color": "#888"})
    return html.Div([
        html.Div([
            dbc.Input(type="color", id={"type": "dataset-color", "index": ds.id}, value=ds.color,
                      style={"width": "40px", "padding": "0", "marginRight": "6px"}),
            dcc.Checklist(
                id={"type": "dataset-visible", "index": ds.id},
                options=[{"label": f" {ds.name}", "value": "visible"}],
                value=["visible"] if ds.visible else [],
                style={"flex": "1", "fontSize": "13px"},
            ),
            dbc.Button("✕", id={"type": "dataset-remove", "index": ds.id}, color="danger",
                       size="sm", outline=True),
        ], style={"display": "flex", "alignItems": "center", "marginBottom": "6px"})
        for ds in datasets
    ])


def controls_panel():
    return html.Div([
        html.H5("View"),
        dbc.Button("Switch to Coefficients View", id="toggle-view", color="primary",
                   style={"width": "100%", "marginBottom": "6px"}),
        html.Div([
            dbc.Button("Reset", id="reset-view", color="secondary", outline=True, size="sm"),
            dbc.Button("Toggle Grid", id="toggle-grid", color="secondary", outline=True, size="sm"),
            dbc.Button("Toggle Zoom", id="toggle-zoom", color="secondary", outline=True, size="sm"),
        ], style={"display": "flex", "gap": "6px", "marginBottom": "10px"}),
        html.Div(id="view-mode", children="Speed View", style={"fontWeight": "bold", "marginBottom": "10px"}),

        html.H5("Parameters"),
        create_field_row("Air density ρ (kg/m³)", parameter_input("rho-input", DEFAULT_RHO, 0.01)),
        create_field_row("Wing area S (m²)", parameter_input("s-input", DEFAULT_S, 0.1)),
        create_field_row("Mass m (kg)", parameter_input("m-input", DEFAULT_M, 1)),
        html.Div(id="param-status", style={"fontSize": "12px", "color": "#b00", "marginBottom": "8px"}),

        create_field_row("Coefficients", dcc.RadioItems(
            id="coeff-type",
            options=[{"label": " C (CL/CD)", "value": "c"}, {"label": " K (KL/KD)", "value": "k"}],
            value="c", inline=True, inputStyle={"marginLeft": "8px"},
        )),
        create_field_row("Speed unit", dcc.RadioItems(
            id="speed-unit",
            options=[{"label": " mph", "value": "mph"}, {"label": " m/s", "value": "mps"}],
            value="mph", inline=True, inputStyle={"marginLeft": "8px"},
        )),
        create_field_row("Axis mapping", dcc.Dropdown(
            id="axis-preset", options=preset_options(), value="default", clearable=False,
        )),
        create_field_row("Interpolation", dcc.RadioItems(
            id="interpolation",
            options=[{"label": " Linear", "value": "linear"}, {"label": " Polar", "value": "polar"}],
            value="linear", inline=True, inputStyle={"marginLeft": "8px"},
        )),

        html.H5("Visibility"),
        dcc.Checklist(
            id="visibility-checklist",
            options=[{"label": f" {label}", "value": key} for key, label in VISIBILITY_LABELS.items()],
            value=[key for key, on in VISIBILITY.items() if on],
            style={"fontSize": "13px", "marginBottom": "10px"},
        ),

        html.H5("Colours"),
        html.Div([
            html.Div([
                dbc.Input(type="color", id={"type": "color-input", "index": key}, value=COLORS[key],
                          style={"width": "40px", "padding": "0", "marginRight": "6px"}),
                html.Span(label, style={"fontSize": "13px"}),
            ], style={"display": "flex", "alignItems": "center", "marginBottom": "4px"})
            for key, label in COLOR_LABELS.items()
        ], style={"marginBottom": "10px"}),

        html.H5("Datasets"),
        dcc.Upload(id="upload-dataset", children=dbc.Button("📂 Load Stallpoint File", color="info",
                                                            size="sm"), multiple=False),
        html.Div(id="upload-status", style={"fontSize": "12px", "marginTop": "4px"}),
        html.Div(id="dataset-list", children=dataset_rows([]), style={"marginTop": "8px"}),
    ], style={"padding": "12px", "overflowY": "auto", "maxHeight": "100vh"})


def create_layout():
    return html.Div([
        dcc.Store(id="screen-width"),
        dcc.Store(id="dataset-version", data=0),
        dcc.Interval(id="frame-interval", interval=FRAME_INTERVAL_MS, disabled=True),
        dbc.Row([
            dbc.Col(controls_panel(), width=3),
            dbc.Col(dcc.Graph(
                id="chart-graph",
                figure=chart.render(),
                config={"displayModeBar": False, "staticPlot": False},
                style={"height": f"{DEFAULT_CANVAS_HEIGHT}px"},
            ), width=9),
        ], className="g-0"),
    ])


app.layout = create_layout

# Detect screen width to size the chart
app.clientside_callback(
    """
    function(_) {
        return window.innerWidth;
    }
    """,
    Output("screen-width", "data"),
    Input("chart-graph", "id")
)


@app.callback(
    Output("chart-graph", "figure"),
    Output("frame-interval", "disabled"),
    Output("view-mode", "children"),
    Output("toggle-view", "children"),
    Output("param-status", "children"),
    Input("frame-interval", "n_intervals"),
    Input("toggle-view", "n_clicks"),
    Input("reset-view", "n_clicks"),
    Input("toggle-grid", "n_clicks"),
    Input("toggle-zoom", "n_clicks"),
    Input("rho-input", "value"),
    Input("s-input", "value"),
    Input("m-input", "value"),
    Input("coeff-type", "value"),
    Input("speed-unit", "value"),
    Input("axis-preset", "value"),
    Input("interpolation", "value"),
    Input("visibility-checklist", "value"),
    Input({"type": "color-input", "index": ALL}, "value"),
    Input("dataset-version", "data"),
    Input("screen-width", "data"),
    State({"type": "color-input", "index": ALL}, "id"),
    prevent_initial_call=True,
)
def update_chart(n_intervals, toggle_clicks, reset_clicks, grid_clicks, zoom_clicks,
                 rho, s, m, coeff_type, speed_unit, preset, interpolation, visible_keys,
                 color_values, dataset_version, screen_width, color_ids):
    trigger = ctx.triggered_id
    status = dash.no_update

    if trigger == "frame-interval":
        if not chart.is_animating:
            raise PreventUpdate
        chart.tick()
    elif trigger == "toggle-view":
        chart.switch_view()
    elif trigger == "reset-view":
        chart.reset()
    elif trigger == "toggle-grid":
        chart.toggle_grid()
    elif trigger == "toggle-zoom":
        chart.toggle_zoom()
    elif trigger in ("rho-input", "s-input", "m-input"):
        raw = {"rho-input": rho, "s-input": s, "m-input": m}[trigger]
        name = trigger.split("-")[0]
        # Cleared or non-numeric inputs arrive as None; reject them explicitly
        accepted = chart.set_parameters(**{name: raw if raw is not None else ""})
        status = "" if accepted else f"Ignored invalid {name} value; keeping {getattr(chart.params, name)}"
    elif trigger == "coeff-type":
        chart.set_coefficient_mode(coeff_type)
    elif trigger == "speed-unit":
        chart.set_speed_unit(speed_unit)
    elif trigger == "axis-preset":
        chart.set_axis_preset(preset)
    elif trigger == "interpolation":
        chart.set_interpolation(interpolation)
    elif trigger == "visibility-checklist":
        chosen = set(visible_keys or [])
        chart.update_visibility({key: key in chosen for key in VISIBILITY})
    elif isinstance(trigger, dict) and trigger.get("type") == "color-input":
        chart.update_colors({cid["index"]: value for cid, value in zip(color_ids, color_values) if value})
    elif trigger == "screen-width":
        if not screen_width:
            raise PreventUpdate
        width = max(600, min(int(screen_width * 0.72), 1400))
        chart.set_viewport(width, DEFAULT_CANVAS_HEIGHT)
    elif trigger != "dataset-version":
        raise PreventUpdate

    view_text = "Coefficients View" if chart.current_view == "coeff" else "Speed View"
    return chart.render(), not chart.is_animating, view_text, chart.toggle_button_label(), status


@app.callback(
    Output("dataset-version", "data", allow_duplicate=True),
    Output("dataset-list", "children", allow_duplicate=True),
    Output("upload-status", "children"),
    Input("upload-dataset", "contents"),
    State("upload-dataset", "filename"),
    State("dataset-version", "data"),
    prevent_initial_call=True,
)
def load_dataset_from_upload(contents, filename, version):
    if not contents or not filename:
        raise PreventUpdate

    try:
        content_type, content_string = contents.split(",", 1)
        text = base64.b64decode(content_string).decode("utf-8")
    except (ValueError, UnicodeDecodeError) as e:
        dprint(f"[UPLOAD ERROR]: {e}")
        return dash.no_update, dash.no_update, dbc.Alert(f"Could not read {filename}", color="danger")

    try:
        dataset_id = chart.add_dataset(filename, text)
    except DatasetParseError as e:
        dprint(f"[UPLOAD ERROR]: {e}")
        return dash.no_update, dash.no_update, dbc.Alert(str(e), color="danger")

    dprint(f"[UPLOAD] Loaded dataset: {filename} as {dataset_id}")
    return (version or 0) + 1, dataset_rows(chart.datasets.get_all_datasets()), \
        dbc.Alert(f"Loaded {filename}", color="success")


@app.callback(
    Output("dataset-version", "data", allow_duplicate=True),
    Output("dataset-list", "children", allow_duplicate=True),
    Input({"type": "dataset-color", "index": ALL}, "value"),
    Input({"type": "dataset-visible", "index": ALL}, "value"),
    Input({"type": "dataset-remove", "index": ALL}, "n_clicks"),
    State("dataset-version", "data"),
    prevent_initial_call=True,
)
def update_or_remove_datasets(colors, visibles, remove_clicks, version):
    trigger = ctx.triggered_id
    if not isinstance(trigger, dict):
        raise PreventUpdate

    dataset_id = trigger["index"]
    value = ctx.triggered[0]["value"]

    if trigger["type"] == "dataset-remove":
        if not value:
            raise PreventUpdate
        chart.remove_dataset(dataset_id)
        return (version or 0) + 1, dataset_rows(chart.datasets.get_all_datasets())
    if trigger["type"] == "dataset-color":
        chart.update_dataset_color(dataset_id, value)
    elif trigger["type"] == "dataset-visible":
        chart.update_dataset_visibility(dataset_id, "visible" in (value or []))

    return (version or 0) + 1, dash.no_update


if __name__ == "__main__":
    # Use env var to control debug (1 = on, 0 = off)
    debug_mode = constants.DEBUG_LOG
    port = int(os.environ.get("SSCHART_PORT", "8050"))

    app.run(debug=debug_mode, host="127.0.0.1", port=port)
