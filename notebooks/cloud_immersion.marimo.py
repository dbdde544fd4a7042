import marimo

__generated_with = "0.19.9"
app = marimo.App(width="medium")


@app.cell
def _():
    import numpy as np
    import pandas as pd
    import plotly.graph_objects as go
    from plotly.subplots import make_subplots
    from scipy import stats

    from cloud_immersion.config import DEFAULT_INPUT_CSV, PipelineConfig
    from cloud_immersion.compute.decomposition import decompose_seasonal, loess_smooth
    from cloud_immersion.compute.derived import low_confidence_dew_point
    from cloud_immersion.compute.rolling import rolling_features, rolling_immersion_pct
    from cloud_immersion.compute.summary import (
        annual_immersion_days,
        immersion_by_doy,
        immersion_profile,
        lowest_immersed_band,
    )
    from cloud_immersion.pipeline import run_file

    return (
        DEFAULT_INPUT_CSV,
        PipelineConfig,
        annual_immersion_days,
        decompose_seasonal,
        go,
        immersion_by_doy,
        immersion_profile,
        loess_smooth,
        low_confidence_dew_point,
        lowest_immersed_band,
        make_subplots,
        np,
        rolling_features,
        rolling_immersion_pct,
        run_file,
        stats,
    )


@app.cell
def _():
    import marimo as mo
    return (mo,)


@app.cell
def _(DEFAULT_INPUT_CSV, mo):
    path_input = mo.ui.text(value=str(DEFAULT_INPUT_CSV), label="Daily CSV", full_width=True)
    latitude_input = mo.ui.number(start=-66.0, stop=66.0, step=0.1, value=10.3, label="Latitude")
    window_input = mo.ui.slider(start=30, stop=1500, step=10, value=1000, label="Rolling window (days)")
    mo.hstack([path_input, latitude_input, window_input], justify="start", align="end", gap=1.5, widths=[0.5, 0.2, 0.3])
    return latitude_input, path_input, window_input


@app.cell
def _(PipelineConfig, latitude_input, path_input, run_file, window_input):
    config = PipelineConfig(
        latitude_deg=latitude_input.value,
        rolling_window_days=window_input.value,
    )
    result = run_file(path_input.value, config)
    derived = result.derived
    immersion = result.immersion
    return config, derived, immersion


@app.cell
def _(derived, mo):
    _first = derived['obs_date'].min()
    _last = derived['obs_date'].max()
    _cloudy = derived['is_cloudy'].mean() * 100
    mo.md(
        f"<div style='font-size:1.5rem;font-weight:700;color:#1d1d1f'>Cloud Immersion</div>"
        f"<div style='font-size:0.8rem;color:#86868b;margin-top:2px'>"
        f"{_first:%b %-d, %Y} – {_last:%b %-d, %Y} · {len(derived):,} days · "
        f"{_cloudy:.1f}% cloudy (Kt &lt; 0.25)</div>"
    )
    return


@app.cell
def _(config, derived, go, low_confidence_dew_point, rolling_features):
    _rolled = rolling_features(derived, config.rolling_window_days, ["cloud_base_m"])
    _low_rh = low_confidence_dew_point(derived["rh_pct"])

    fig_cbh = go.Figure()
    fig_cbh.add_trace(go.Scatter(
        x=derived['obs_date'], y=derived['cloud_base_m'],
        mode='lines', line=dict(color='rgba(0,113,227,0.25)', width=1),
        name='Daily',
    ))
    fig_cbh.add_trace(go.Scatter(
        x=derived['obs_date'], y=_rolled['cloud_base_m'],
        mode='lines', line=dict(color='#0071e3', width=2.5),
        name=f'{config.rolling_window_days}-day mean',
    ))
    fig_cbh.add_trace(go.Scatter(
        x=derived.loc[_low_rh, 'obs_date'], y=derived.loc[_low_rh, 'cloud_base_m'],
        mode='markers', marker=dict(size=4, color='#e65100'),
        name=f'RH &lt; 50% ({int(_low_rh.sum())} days, low confidence)',
    ))
    fig_cbh.update_layout(
        title='Cloud base height', yaxis_title='m', height=360,
        plot_bgcolor='white', paper_bgcolor='white', hovermode='x unified',
        margin=dict(l=44, r=8, t=40, b=40),
    )
    fig_cbh
    return


@app.cell
def _(config, derived, go, immersion, rolling_immersion_pct):
    _rolled = rolling_immersion_pct(immersion, config.rolling_window_days)
    _shown = [e for e in _rolled.columns if e % 100 == 0]

    fig_roll = go.Figure()
    for _e in _shown:
        fig_roll.add_trace(go.Scatter(
            x=derived['obs_date'], y=_rolled[_e], mode='lines', name=f'{_e} m',
        ))
    fig_roll.update_layout(
        title=f'Days immersed, trailing {config.rolling_window_days}-day window',
        yaxis=dict(title='% of days', ticksuffix='%'), height=380,
        plot_bgcolor='white', paper_bgcolor='white', hovermode='x unified',
        margin=dict(l=44, r=8, t=40, b=40),
    )
    fig_roll
    return


@app.cell
def _(config, decompose_seasonal, derived, make_subplots, mo, go):
    try:
        _parts = decompose_seasonal(derived['cloud_base_m'], derived['obs_date'], period=config.seasonal_period_days)
    except ValueError as _e:
        _out = mo.callout(mo.md(f"STL skipped: {_e}"), kind="warn")
    else:
        _out = make_subplots(rows=4, cols=1, shared_xaxes=True, subplot_titles=list(_parts.columns))
        for _i, _col in enumerate(_parts.columns, start=1):
            _out.add_trace(go.Scatter(x=_parts.index, y=_parts[_col], mode='lines', line=dict(width=1), name=_col), row=_i, col=1)
        _out.update_layout(height=720, showlegend=False, title='STL decomposition of cloud base height')
    _out
    return


@app.cell
def _(derived, go, loess_smooth):
    _fit = loess_smooth(derived['doy'], derived['cloud_base_m'], frac=0.1)

    fig_loess = go.Figure()
    fig_loess.add_trace(go.Scattergl(
        x=derived['doy'], y=derived['cloud_base_m'], mode='markers',
        marker=dict(size=3, color='rgba(0,0,0,0.15)'), name='Daily',
    ))
    fig_loess.add_trace(go.Scatter(
        x=_fit['x'], y=_fit['fitted'], mode='lines', line=dict(color='#bf2600', width=2.5), name='LOESS',
    ))
    fig_loess.update_layout(
        title='Cloud base height by day of year', xaxis_title='Day of year', yaxis_title='m',
        height=380, plot_bgcolor='white', paper_bgcolor='white',
    )
    fig_loess
    return


@app.cell
def _(go, immersion, immersion_profile):
    _profile = immersion_profile(immersion)

    fig_profile = go.Figure(go.Bar(
        x=_profile.values, y=_profile.index, orientation='h', marker_color='#0071e3',
    ))
    fig_profile.update_layout(
        title='Share of days immersed by elevation', xaxis=dict(title='% of days', ticksuffix='%'),
        yaxis_title='Elevation (m)', height=480, plot_bgcolor='white', paper_bgcolor='white',
    )
    fig_profile
    return


@app.cell
def _(derived, go, immersion, immersion_by_doy):
    _clim = immersion_by_doy(derived, immersion)

    fig_heat = go.Figure(go.Heatmap(
        x=_clim.index, y=_clim.columns, z=_clim.T.values, colorscale='Blues',
        colorbar=dict(title='%'),
    ))
    fig_heat.update_layout(
        title='Immersion climatology', xaxis_title='Day of year', yaxis_title='Elevation (m)',
        height=420,
    )
    fig_heat
    return


@app.cell
def _(derived, go, immersion, lowest_immersed_band):
    _floor = lowest_immersed_band(immersion)

    fig_floor = go.Figure()
    fig_floor.add_trace(go.Scattergl(
        x=derived['obs_date'], y=_floor, mode='markers',
        marker=dict(size=3, color='#0071e3'), name='Lowest immersed band',
        hovertemplate='%{x|%b %-d, %Y}  <b>%{y:.0f} m</b><extra></extra>',
    ))
    fig_floor.update_layout(
        title=f'Daily immersion floor ({int(_floor.notna().sum()):,} immersed days)',
        yaxis_title='Elevation (m)', height=360,
        plot_bgcolor='white', paper_bgcolor='white',
        margin=dict(l=44, r=8, t=40, b=40),
    )
    fig_floor
    return


@app.cell
def _(annual_immersion_days, derived, immersion, mo, np, stats):
    _annual = annual_immersion_days(derived, immersion)
    _band = 500 if 500 in _annual.columns else _annual.columns[len(_annual.columns) // 2]
    _latest_year = int(_annual.index.max())
    _latest = _annual.loc[_latest_year, _band]
    _history = _annual.loc[_annual.index != _latest_year, _band]
    _rank = stats.percentileofscore(_history, _latest, kind='rank') if len(_history) else np.nan

    mo.md(
        f"<div style='font-size:0.9rem;color:#1d1d1f;border-top:1px solid #e5e5ea;padding-top:0.75rem'>"
        f"<b>{_latest_year}</b>: {_latest} immersed days at {_band} m "
        f"<span style='color:#86868b'>({_rank:.0f}th percentile of {len(_history)} earlier years)</span>"
        f"</div>"
    )
    return


if __name__ == "__main__":
    app.run()
