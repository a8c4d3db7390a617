"""Web UI and REST API for the roster manager."""

from __future__ import annotations

from html import escape
from typing import Mapping

import anyio
from fastapi import FastAPI, Form, HTTPException, Request
from fastapi.responses import HTMLResponse, JSONResponse, Response

from rosterbook.api.schemas import PlayerResponse, RosterResponse, RosterStatsResponse
from rosterbook.config import PLACEHOLDER_POSITION, RosterSettings, iter_positions, load_settings, position_label
from rosterbook.errors import StorageError
from rosterbook.export import export_roster_to_csv
from rosterbook.roster import RosterStats
from rosterbook.session import RESET_PHRASE, Outcome, RosterSession


_CONFIRM_VALUES = {"yes", "y", "true", "on", "1"}


def _display(value: int | None) -> str:
    return "-" if value is None else str(value)


def _stats_to_response(stats: RosterStats) -> RosterStatsResponse:
    return RosterStatsResponse(
        total_value=stats.total_value,
        remaining=stats.remaining,
        remaining_slots=stats.remaining_slots,
        average=stats.average,
    )


def roster_to_response(session: RosterSession) -> RosterResponse:
    return RosterResponse(
        players=[
            PlayerResponse(
                id=record.id,
                name=record.name,
                position=record.position,
                playing_style=record.playing_style,
                value=record.value,
            )
            for record in session.records
            if record.id is not None
        ],
        stats=_stats_to_response(session.stats),
        target=session.target,
        roster_cap=session.roster_cap,
    )


def _render_page(body: str) -> str:
    return f"""<!DOCTYPE html>
<html lang=\"en\">
<head>
    <meta charset=\"utf-8\">
    <title>Roster Manager</title>
    <style>
        body {{ font-family: Arial, sans-serif; margin: 2rem; background: #f5f7fa; }}
        main {{ background: #fff; padding: 2rem; border-radius: 12px; box-shadow: 0 2px 6px rgba(0,0,0,0.08); }}
        nav a {{ margin-right: 1rem; color: #2563eb; text-decoration: none; }}
        form {{ display: grid; gap: 1rem; margin-bottom: 2rem; }}
        form.inline {{ display: inline; margin: 0; }}
        label {{ font-weight: 600; }}
        input, select {{ width: 100%; padding: 0.5rem; border-radius: 6px; border: 1px solid #cbd5e1; }}
        button {{ padding: 0.6rem 1.2rem; border-radius: 6px; border: none; background: #2563eb; color: #fff; cursor: pointer; }}
        button.secondary {{ background: #475569; }}
        button.danger {{ background: #b91c1c; }}
        table {{ border-collapse: collapse; width: 100%; margin-top: 1rem; }}
        th, td {{ padding: 0.5rem; border: 1px solid #e2e8f0; text-align: left; }}
        .flash {{ padding: 1rem; border-radius: 6px; margin-bottom: 1rem; }}
        .flash.success {{ background: #ecfdf5; color: #047857; }}
        .flash.error {{ background: #fef2f2; color: #b91c1c; }}
        .stats {{ display: flex; gap: 1rem; flex-wrap: wrap; margin-bottom: 1.5rem; }}
        .stats div {{ flex: 1 1 140px; padding: 1rem; border: 1px solid #e2e8f0; border-radius: 8px; background: #f8fafc; }}
        .stats span {{ display: block; font-size: 1.4rem; font-weight: 600; }}
        .settings {{ display: flex; gap: 1rem; flex-wrap: wrap; }}
        .settings form {{ flex: 1 1 240px; }}
        .empty-state td {{ text-align: center; color: #64748b; padding: 2rem; }}
    </style>
</head>
<body>
    <nav><a href=\"/ui\">Roster</a><a href=\"/players/export.csv\">Export CSV</a></nav>
    <main>{body}</main>
</body>
</html>"""


def _render_terminal_page(message: str) -> str:
    body = (
        "<h1>Roster storage unavailable</h1>"
        f"<div class='flash error'>{escape(message)}</div>"
        "<p>The roster cannot be used without durable storage. Fix the problem and restart the server.</p>"
    )
    return _render_page(body)


def _render_player_form(session: RosterSession, form_values: Mapping[str, str] | None) -> str:
    editing = session.editing
    if form_values is None and editing is not None:
        form_values = {
            "name": editing.record.name,
            "position": editing.record.position,
            "playing_style": editing.record.playing_style,
            "value": _display(editing.record.value),
        }
    values = dict(form_values or {})
    selected = values.get("position", PLACEHOLDER_POSITION)

    options = [
        f"<option value=\"{PLACEHOLDER_POSITION}\"{' selected' if selected == PLACEHOLDER_POSITION else ''}>Select position</option>"
    ]
    for code, label in iter_positions():
        marker = " selected" if code == selected else ""
        options.append(f"<option value=\"{code}\"{marker}>{code} ({escape(label)})</option>")

    submit_label = "Update Player" if editing is not None else "Add Player"
    cancel_html = ""
    if editing is not None:
        cancel_html = (
            "<form class='inline' method='post' action='/ui/players/cancel-edit'>"
            "<button type='submit' class='secondary'>Cancel Edit</button></form>"
        )
    return f"""
<h2>{'Edit Player' if editing is not None else 'Add Player'}</h2>
<form method=\"post\" action=\"/ui/players\">
    <label for=\"name\">Name</label>
    <input id=\"name\" name=\"name\" value=\"{escape(values.get('name', ''))}\">
    <label for=\"position\">Position</label>
    <select id=\"position\" name=\"position\">{''.join(options)}</select>
    <label for=\"playing_style\">Playing Style</label>
    <input id=\"playing_style\" name=\"playing_style\" value=\"{escape(values.get('playing_style', ''))}\">
    <label for=\"value\">Value</label>
    <input id=\"value\" name=\"value\" type=\"number\" min=\"1\" value=\"{escape(values.get('value', ''))}\">
    <button type=\"submit\" id=\"addPlayerBtn\">{submit_label}</button>
</form>
{cancel_html}
"""


def _render_table(session: RosterSession) -> str:
    records = session.records
    if not records:
        rows = (
            "<tr class='empty-state'><td colspan='5'>"
            "No players added yet. Add your first player above!</td></tr>"
        )
    else:
        rows = "".join(
            "<tr>"
            f"<td>{escape(record.name)}</td>"
            f"<td title=\"{escape(position_label(record.position))}\">{escape(record.position)}</td>"
            f"<td>{escape(record.playing_style)}</td>"
            f"<td>{_display(record.value)}</td>"
            "<td>"
            f"<form class='inline' method='post' action='/ui/players/{index}/edit'>"
            "<button type='submit' class='secondary'>Edit</button></form> "
            f"<form class='inline' method='post' action='/ui/players/{record.id}/delete' "
            "onsubmit=\"return confirm('Are you sure you want to delete this player?');\">"
            "<input type='hidden' name='confirm' value='yes'>"
            "<button type='submit' class='danger'>Delete</button></form>"
            "</td>"
            "</tr>"
            for index, record in enumerate(records)
        )
    return (
        "<table><thead><tr><th>Name</th><th>Position</th><th>Playing Style</th><th>Value</th><th>Actions</th></tr></thead>"
        f"<tbody id='tableBody'>{rows}</tbody></table>"
    )


def _render_index_page(
    session: RosterSession,
    *,
    error: str | None = None,
    success: str | None = None,
    form_values: Mapping[str, str] | None = None,
) -> str:
    stats = session.stats
    flash_html = ""
    if error:
        flash_html += f"<div class='flash error'>{escape(error)}</div>"
    if success:
        flash_html += f"<div class='flash success'>{escape(success)}</div>"

    stats_html = f"""
<section class=\"stats\">
    <div>Target<span id=\"targetValue\">{_display(session.target)}</span></div>
    <div>Total Value<span id=\"totalValue\">{stats.total_value}</span></div>
    <div>Remaining<span id=\"remainingValue\">{_display(stats.remaining)}</span></div>
    <div>Open Slots<span id=\"remainingSlots\">{stats.remaining_slots}</span></div>
    <div>Average per Slot<span id=\"averageValue\">{_display(stats.average)}</span></div>
</section>
"""
    target_value = "" if session.target is None else str(session.target)
    settings_html = f"""
<section class=\"settings\">
    <form method=\"post\" action=\"/ui/target\">
        <label for=\"targetInput\">Target Budget</label>
        <input id=\"targetInput\" name=\"target\" type=\"number\" value=\"{target_value}\">
        <button type=\"submit\">Set Target</button>
    </form>
    <form method=\"post\" action=\"/ui/cap\">
        <label for=\"maxPlayers\">Roster Size</label>
        <input id=\"maxPlayers\" name=\"roster_cap\" type=\"number\" min=\"1\" value=\"{session.roster_cap}\">
        <button type=\"submit\">Set Roster Size</button>
    </form>
</section>
"""
    reset_html = f"""
<h2>Reset</h2>
<form method=\"post\" action=\"/ui/reset\"
      onsubmit=\"return confirm('Are you sure you want to reset ALL data? This cannot be undone.');\">
    <label for=\"confirm_phrase\">Type {RESET_PHRASE} to delete every player and the target</label>
    <input id=\"confirm_phrase\" name=\"confirm_phrase\" autocomplete=\"off\">
    <button type=\"submit\" class=\"danger\" id=\"resetBtn\">Reset All Data</button>
</form>
"""
    body = (
        "<h1>Roster Manager</h1>"
        + flash_html
        + stats_html
        + settings_html
        + _render_player_form(session, form_values)
        + "<h2>Players</h2>"
        + _render_table(session)
        + reset_html
    )
    return _render_page(body)


def create_app(settings: RosterSettings | None = None) -> FastAPI:
    settings = settings or load_settings()
    app = FastAPI(title="rosterbook")
    session = RosterSession.from_settings(settings)
    app.state.settings = settings
    app.state.session = session
    app.state.startup_error = None
    start_lock = anyio.Lock()

    async def ensure_started() -> RosterSession:
        if session.started:
            return session
        # Concurrent first requests share one start attempt.
        async with start_lock:
            if app.state.startup_error is not None:
                raise StorageError(app.state.startup_error)
            if not session.started:
                try:
                    await session.start()
                except StorageError as exc:
                    app.state.startup_error = str(exc)
                    raise
        return session

    def outcome_page(outcome: Outcome, form_values: Mapping[str, str] | None = None) -> HTMLResponse:
        if outcome.ok:
            content = _render_index_page(session, success=outcome.message)
            return HTMLResponse(content)
        content = _render_index_page(session, error=outcome.message, form_values=form_values)
        return HTMLResponse(content, status_code=400)

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError) -> Response:
        if request.url.path.startswith("/ui"):
            return HTMLResponse(_render_terminal_page(str(exc)), status_code=503)
        return JSONResponse({"detail": str(exc)}, status_code=503)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/players", response_model=RosterResponse)
    async def list_players() -> RosterResponse:
        await ensure_started()
        return roster_to_response(session)

    @app.get("/players/export.csv")
    async def export_players() -> Response:
        await ensure_started()
        return Response(
            content=export_roster_to_csv(session.records),
            media_type="text/csv",
            headers={"Content-Disposition": "attachment; filename=roster.csv"},
        )

    @app.get("/players/{index}", response_model=PlayerResponse)
    async def get_player(index: int) -> PlayerResponse:
        await ensure_started()
        records = session.records
        if not 0 <= index < len(records):
            raise HTTPException(status_code=404, detail="Player not found")
        record = records[index]
        return PlayerResponse.model_validate(record.model_dump())

    @app.get("/ui", response_class=HTMLResponse)
    async def ui_index():
        await ensure_started()
        return HTMLResponse(_render_index_page(session))

    @app.post("/ui/players", response_class=HTMLResponse)
    async def ui_submit_player(
        name: str = Form(""),
        position: str = Form(PLACEHOLDER_POSITION),
        playing_style: str = Form(""),
        value: str = Form(""),
    ):
        await ensure_started()
        form_values = {
            "name": name,
            "position": position,
            "playing_style": playing_style,
            "value": value,
        }
        outcome = await session.submit(form_values)
        return outcome_page(outcome, form_values)

    @app.post("/ui/players/cancel-edit", response_class=HTMLResponse)
    async def ui_cancel_edit():
        await ensure_started()
        return outcome_page(await session.cancel_edit())

    @app.post("/ui/players/{index}/edit", response_class=HTMLResponse)
    async def ui_begin_edit(index: int):
        await ensure_started()
        return outcome_page(await session.begin_edit(index))

    @app.post("/ui/players/{player_id}/delete", response_class=HTMLResponse)
    async def ui_delete_player(player_id: int, confirm: str = Form("")):
        await ensure_started()
        confirmed = confirm.strip().lower() in _CONFIRM_VALUES
        outcome = await session.request_delete(player_id, lambda prompt: confirmed)
        return outcome_page(outcome)

    @app.post("/ui/target", response_class=HTMLResponse)
    async def ui_set_target(target: str = Form("")):
        await ensure_started()
        return outcome_page(await session.set_target(target))

    @app.post("/ui/cap", response_class=HTMLResponse)
    async def ui_set_roster_cap(roster_cap: str = Form("")):
        await ensure_started()
        return outcome_page(await session.set_roster_cap(roster_cap))

    @app.post("/ui/reset", response_class=HTMLResponse)
    async def ui_reset(confirm_phrase: str = Form("")):
        await ensure_started()
        confirmed = confirm_phrase.strip() == RESET_PHRASE
        return outcome_page(await session.request_reset(lambda prompt: confirmed))

    return app


__all__ = ["RESET_PHRASE", "create_app", "roster_to_response"]
