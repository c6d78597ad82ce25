"""
workspace.py — CodeMigrate Workspace Page
-----------------------------------------

Streamlit page for converting legacy JavaScript to ES6+ or TypeScript.

Features:
- Legacy source editor preloaded with a sample, plus an editable output pane
- Target picker (ES6+ Modules / TypeScript)
- Split diff view with line counts, copy and export
- Per-tab migration history in the sidebar (select / delete / clear)

State lives in `st.session_state`; the conversion itself happens in the
relay service reached through `ui.client.MigrationClient`.

Dependencies:
- streamlit
- httpx (via ui.client)
"""

import streamlit as st

from config.settings import get_settings
from migrator.core.prompt import TARGET_FORMATS, export_filename, target_option
from migrator.core.sessions import format_day, format_time
from migrator.tools.diff import diff_stats, line_count, render_html, side_by_side
from ui.client import MigrationClient
from ui.state import (
    handle_clear_history,
    handle_delete,
    handle_migrate,
    handle_reset,
    handle_select,
    init_state,
)


def _notify(title: str, description: str, error: bool) -> None:
    st.toast(f"**{title}** {description}", icon="⚠️" if error else "✅")


def _set(key: str, value) -> None:
    st.session_state[key] = value


@st.cache_resource
def _client(endpoint: str) -> MigrationClient:
    return MigrationClient(endpoint=endpoint)


def render_history() -> None:
    history = st.session_state.history
    with st.sidebar:
        if not len(history):
            st.markdown("#### 🕘 History")
            st.caption("No migrations yet")
            st.caption("Your migration history will appear here")
            return

        st.markdown(f"#### 🕘 History `{len(history)}`")
        st.button(
            "Clear history",
            key="clear_history",
            on_click=handle_clear_history,
            args=(st.session_state, _notify),
            width="stretch",
        )
        for session in history:
            selected = session.id == history.selected_id
            with st.container(border=True):
                st.markdown(
                    f"{'▶ ' if selected else ''}**{session.label}** · {session.line_count} lines"
                )
                st.caption(f"`{session.preview}`")
                st.caption(f"🕒 {format_day(session.timestamp)} at {format_time(session.timestamp)}")
                open_col, delete_col = st.columns([3, 1])
                open_col.button(
                    "Open",
                    key=f"open_{session.id}",
                    on_click=handle_select,
                    args=(st.session_state, session.id),
                    width="stretch",
                )
                delete_col.button(
                    "🗑",
                    key=f"delete_{session.id}",
                    on_click=handle_delete,
                    args=(st.session_state, session.id, _notify),
                )


def render_header(client: MigrationClient) -> None:
    title_col, target_col, action_col = st.columns([2, 3, 2])
    with title_col:
        st.markdown("### 🧬 CodeMigrate AI")
        st.caption("Legacy to Modern JavaScript")
    with target_col:
        st.radio(
            "Convert to:",
            TARGET_FORMATS,
            key="target_format",
            horizontal=True,
            format_func=lambda t: f"{target_option(t)['label']} · {target_option(t)['description']}",
        )
    with action_col:
        reset_col, migrate_col = st.columns(2)
        reset_col.button("↺ Reset", key="reset", on_click=handle_reset, args=(st.session_state,))
        migrate_col.button(
            "Migrating..." if st.session_state.is_loading else "✨ Migrate Code",
            key="migrate",
            type="primary",
            disabled=st.session_state.is_loading,
            on_click=_migrate,
            args=(client,),
        )


def _migrate(client: MigrationClient) -> None:
    with st.spinner("Migrating..."):
        handle_migrate(st.session_state, client, _notify)


def render_diff() -> None:
    source = st.session_state.source_code
    migrated = st.session_state.migrated_code
    target = st.session_state.target_format
    stats = diff_stats(source, migrated)

    head_col, back_col, export_col = st.columns([4, 1, 1])
    head_col.markdown(
        f"#### Migration Diff  `{line_count(source)} → {line_count(migrated)} lines`"
        f"  `+{stats['added']} / −{stats['removed']}`"
    )
    back_col.button("Back to Editor", key="back_to_editor", on_click=_set, args=("show_diff", False))
    export_col.download_button(
        f"⬇ Export {export_filename(target)}",
        data=migrated,
        file_name=export_filename(target),
        mime="text/plain",
        key="export",
        on_click=_notify,
        args=("File exported", f"Saved as {export_filename(target)}", False),
    )

    st.markdown(render_html(side_by_side(source, migrated)), unsafe_allow_html=True)

    with st.expander("Copy migrated code"):
        st.code(migrated, language=target_option(target)["language"])


def render_editors() -> None:
    target = target_option(st.session_state.target_format)
    source_col, output_col = st.columns(2)

    with source_col:
        st.markdown("🟡 **LEGACY CODE**")
        st.text_area(
            "Legacy code",
            key="source_code",
            height=520,
            placeholder="// Paste your legacy code here...",
            label_visibility="collapsed",
        )

    with output_col:
        if st.session_state.migrated_code:
            st.markdown(f"🔵 **{target['title'].upper()} OUTPUT**")
            st.text_area(
                "Migrated code",
                key="migrated_code",
                height=520,
                label_visibility="collapsed",
            )
        else:
            st.markdown(
                f"🔵 **{target['title'].upper()} OUTPUT** "
                "<span style='opacity:0.6'>(click \"Migrate Code\" to transform)</span>",
                unsafe_allow_html=True,
            )
            st.info("⚡ Migrated code will appear here\n\nPowered by AI")


def render_status_bar() -> None:
    target = st.session_state.target_format
    target_text = "TypeScript" if target == "typescript" else "ES6+ Modules"
    st.divider()
    st.caption(
        f"Lines: {line_count(st.session_state.source_code)}  ·  Target: {target_text}  ·  🟢 Ready"
    )


def render() -> None:
    settings = get_settings()
    init_state(st.session_state, history_limit=settings.history_limit)
    # Widget-bound values are dropped on runs where their widget isn't drawn
    # (e.g. the editors while the diff is shown); re-assigning keeps them.
    for key in ("source_code", "migrated_code", "target_format"):
        st.session_state[key] = st.session_state[key]
    client = _client(settings.migrate_api_url)

    render_history()
    render_header(client)

    if st.session_state.show_diff and st.session_state.migrated_code:
        render_diff()
    else:
        render_editors()

    render_status_bar()
