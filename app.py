import logging
import os

import streamlit as st
from dotenv import load_dotenv

from habit_tracker import storage
from habit_tracker.analytics import get_dashboard_summary
from habit_tracker.habits import create_habit, edit_habit, generate_sample_habits
from habit_tracker.models import THEMES
from habit_tracker.store import Store
from habit_tracker.ui_components import (
    render_add_habit_form, render_analytics, render_badges, render_edit_habit_form, render_habit_card
)
from habit_tracker.utils import get_todays_habits, today as current_day

load_dotenv()
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

st.set_page_config(
    page_title="Habit Tracker",
    page_icon="✨",
    layout="wide",
    initial_sidebar_state="expanded"
)

# Store Initialization
if "store" not in st.session_state:
    store = Store(storage=storage.LocalStorage)
    store.initialize()
    st.session_state.store = store

store = st.session_state.store
state = store.state
today = current_day()

THEME_CSS = {
    "dark": "<style>.stApp { background-color: #0E1117; color: #FAFAFA; }</style>",
    "light": "<style>.stApp { background-color: #FFFFFF; color: #31333F; }</style>",
}
if state.theme in THEME_CSS:
    st.markdown(THEME_CSS[state.theme], unsafe_allow_html=True)


def announce_unlocks():
    for badge in store.recent_unlocks:
        st.toast(f"Badge unlocked: {badge.icon} {badge.name}")


# --- ONBOARDING ---
if state.is_onboarding:
    _, center, _ = st.columns([1, 2, 1])
    with center:
        st.title("👋 Welcome to Habit Tracker")
        st.write("Build better habits one day at a time. Track streaks, earn badges, and watch your progress grow.")
        with st.form("onboarding_form"):
            name = st.text_input("What should we call you?")
            with_samples = st.checkbox("Start with a few sample habits", value=True)
            if st.form_submit_button("Get Started 🚀", use_container_width=True):
                if not name.strip():
                    st.error("Please enter your name.")
                else:
                    store.complete_onboarding(name.strip())
                    if with_samples and not store.state.habits:
                        for habit in generate_sample_habits():
                            store.add_habit(habit)
                    st.rerun()
    st.stop()

st.title(f"✨ Hi {state.user.name}")

# Navigation
selected_tab = st.radio(
    "Navigation",
    ["🔥 Today", "➕ Add Habit", "📊 Analytics", "🏅 Badges", "⚙️ Settings"],
    horizontal=True,
    label_visibility="collapsed"
)

# Custom Navbar CSS
st.markdown("""
<style>
    div[role="radiogroup"] {
        display: flex;
        flex-wrap: wrap;
        justify-content: center;
        gap: 10px;
        padding: 10px;
        margin-bottom: 20px;
    }
    div[role="radiogroup"] label {
        padding: 12px 20px;
        border-radius: 15px;
        border: 1px solid #363945;
        cursor: pointer;
        font-weight: 600;
        margin: 5px !important;
        flex-grow: 1;
        text-align: center;
        min-width: 140px;
    }
</style>
""", unsafe_allow_html=True)

if selected_tab == "🔥 Today":
    summary = get_dashboard_summary(state.habits, today)

    with st.container(border=True):
        m1, m2, m3, m4 = st.columns(4)
        m1.metric("Done Today", f"{summary['completed_today']} / {summary['due_today']}")
        m2.metric("Today", f"{summary['today_rate']}%")
        m3.metric("Total Streak", summary['total_streak'])
        m4.metric("Total Check-ins", summary['total_completions'])
        st.progress(summary['today_rate'] / 100)

    st.markdown("### Today's Focus")
    todays_habits = get_todays_habits(state.habits, today)

    if not state.habits:
        st.info("No habits found. Go to 'Add Habit' to start!")
    elif not todays_habits:
        st.write("No habits scheduled for today.")
    else:
        if summary['completed_today'] == summary['due_today']:
            st.success("🎉 All habits completed for today! You are crushing it!")

        def on_toggle(habit_id):
            store.toggle_habit(habit_id, today)

        def on_move(habit_id, new_index):
            store.move_habit(habit_id, new_index, today)

        for position, habit in enumerate(todays_habits):
            render_habit_card(habit, today, on_toggle, on_move, position, len(todays_habits))

    announce_unlocks()

elif selected_tab == "➕ Add Habit":
    st.write("### Create New Habit")

    if "habit_success" in st.session_state:
        st.success(st.session_state.habit_success)
        del st.session_state["habit_success"]

    habit_data = render_add_habit_form()
    if habit_data:
        order = max((h.order for h in state.habits), default=-1) + 1
        store.add_habit(create_habit(order=order, **habit_data))
        st.session_state.habit_success = f"Habit '{habit_data['title']}' created successfully!"
        st.rerun()

elif selected_tab == "📊 Analytics":
    render_analytics(state.habits, today)

elif selected_tab == "🏅 Badges":
    unlocked = sum(b.unlocked for b in state.badges)
    st.write(f"### 🏅 Achievements ({unlocked} / {len(state.badges)})")
    render_badges(state.badges)

elif selected_tab == "⚙️ Settings":
    st.header("⚙️ Habit Management Center")
    st.caption("Manage your habits, appearance and data.")

    tab_habits, tab_appearance, tab_data = st.tabs(["✨ Habits", "🎨 Appearance", "💾 Data"])

    # --- HABITS MANAGEMENT ---
    with tab_habits:
        if "edit_mode_id" not in st.session_state:
            st.session_state.edit_mode_id = None

        if not state.habits:
            st.info("No habits to manage yet.")
        elif st.session_state.edit_mode_id and store.get_habit(st.session_state.edit_mode_id):
            habit_to_edit = store.get_habit(st.session_state.edit_mode_id)

            if st.button("← Back to List", key="back_edit"):
                st.session_state.edit_mode_id = None
                st.rerun()

            updated_data = render_edit_habit_form(habit_to_edit)
            if updated_data:
                store.update_habit(edit_habit(habit_to_edit, **updated_data))
                st.success("Habit updated successfully!")
                st.session_state.edit_mode_id = None
                st.rerun()
        else:
            for habit in sorted(state.habits, key=lambda h: h.order):
                with st.container(border=True):
                    c1, c2 = st.columns([4, 1])
                    with c1:
                        st.markdown(f"**{habit.emoji} {habit.title}**")
                        st.caption(f"{habit.category} • {habit.frequency}")
                    with c2:
                        b1, b2 = st.columns(2)
                        with b1:
                            if st.button("✏️", key=f"edit_{habit.id}", help="Edit Habit"):
                                st.session_state.edit_mode_id = habit.id
                                st.rerun()
                        with b2:
                            if st.button("🗑️", key=f"del_{habit.id}", help="Delete Habit"):
                                store.delete_habit(habit.id)
                                st.rerun()

    # --- APPEARANCE ---
    with tab_appearance:
        theme = st.radio("Theme", THEMES, index=THEMES.index(state.theme), horizontal=True)
        if theme != state.theme:
            store.set_theme(theme)
            st.rerun()

    # --- DATA ---
    with tab_data:
        st.download_button(
            "⬇️ Export Data",
            data=storage.export_data(),
            file_name=f"habit-tracker-{today.isoformat()}.json",
            mime="application/json",
        )

        uploaded = st.file_uploader("Import Data", type=["json"])
        if uploaded is not None and st.button("Import"):
            if storage.import_data(uploaded.getvalue().decode("utf-8")):
                store.initialize()
                st.success("Data imported successfully!")
                st.rerun()
            else:
                st.error("Import failed: the file is not a valid export.")

        st.divider()
        if st.button("🗑️ Clear All Data", type="secondary"):
            storage.clear_all_data()
            del st.session_state["store"]
            st.rerun()
