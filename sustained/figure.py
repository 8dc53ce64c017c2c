# sustained/figure.py

"""
Plotly rendering of a Frame.
The figure uses pixel coordinates directly: x grows right, y grows down.
"""

import plotly.graph_objects as go

from .constants import (
    AXIS_COLOR,
    DATASET_LINE_OPACITY,
    DATASET_MARKER_SIZE,
    LINE_OPACITY,
)


def build_figure(frame):
    fig = go.Figure()

    ox, oy = frame.origin
    fig.add_shape(type="line", x0=0, x1=frame.width, y0=oy, y1=oy,
                  line=dict(color=AXIS_COLOR, width=2), layer="below")
    fig.add_shape(type="line", x0=ox, x1=ox, y0=0, y1=frame.height,
                  line=dict(color=AXIS_COLOR, width=2), layer="below")

    # One trace per colour/kind keeps the trace count low during animation
    merged = {}
    for curve in frame.curves:
        key = (curve.color, curve.kind)
        xs, ys = merged.setdefault(key, ([], []))
        if xs:
            xs.append(None)
            ys.append(None)
        xs.extend(curve.xs)
        ys.extend(curve.ys)

    for (color, kind), (xs, ys) in merged.items():
        fig.add_trace(go.Scatter(
            x=xs, y=ys,
            mode="lines",
            line=dict(color=color, width=2),
            opacity=LINE_OPACITY,
            connectgaps=False,
            hoverinfo="skip",
            showlegend=False,
            name=kind,
        ))

    if frame.labels:
        fig.add_trace(go.Scatter(
            x=[lb.x for lb in frame.labels],
            y=[lb.y for lb in frame.labels],
            mode="text",
            text=[lb.text for lb in frame.labels],
            textfont=dict(color=[lb.color for lb in frame.labels], size=11, family="Arial Black"),
            hoverinfo="skip",
            showlegend=False,
            name="labels",
        ))

    for ds in frame.datasets:
        fig.add_trace(go.Scatter(
            x=ds.line_xs, y=ds.line_ys,
            mode="lines",
            line=dict(color=ds.color, width=3),
            opacity=DATASET_LINE_OPACITY,
            connectgaps=False,
            hoverinfo="skip",
            showlegend=False,
            name=ds.name,
        ))
        fig.add_trace(go.Scatter(
            x=ds.marker_xs, y=ds.marker_ys,
            mode="markers",
            marker=dict(color=ds.color, size=DATASET_MARKER_SIZE),
            name=ds.name,
            hovertemplate=f"{ds.name}<extra></extra>",
        ))

    for i, line in enumerate(frame.legend):
        fig.add_annotation(
            x=20, y=25 + 20 * i,
            xref="x", yref="y",
            text=f"<b>{line}</b>" if i == 0 else line,
            showarrow=False,
            xanchor="left",
            font=dict(color=frame.legend_color, size=14 if i == 0 else 12),
        )

    fig.update_layout(
        paper_bgcolor=frame.background,
        plot_bgcolor=frame.background,
        margin=dict(l=0, r=0, t=0, b=0),
        xaxis=dict(range=[0, frame.width], visible=False, fixedrange=True),
        yaxis=dict(range=[frame.height, 0], visible=False, fixedrange=True),
        width=frame.width,
        height=frame.height,
        dragmode=False,
        hovermode="closest",
        showlegend=bool(frame.datasets),
        legend=dict(x=1, y=1, xanchor="right", yanchor="top"),
        uirevision="chart",
    )
    return fig
