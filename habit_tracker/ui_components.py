import pandas as pd
import plotly.express as px
import streamlit as st

from habit_tracker.analytics import get_day_of_week_stats, get_habit_stats
from habit_tracker.models import HABIT_CATEGORIES, HABIT_EMOJIS

WEEKDAYS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]

FREQUENCY_OPTIONS = {
    "daily": "Every Day",
    "weekly": "Once a Week",
    "custom": "Specific Days of Week",
}


def format_frequency(habit):
    """Helper to display frequency nicely."""
    if habit.frequency == 'daily':
        return "Every Day"
    days = habit.custom_days
    if habit.frequency == 'weekly':
        return f"Weekly on {', '.join(WEEKDAYS[d] for d in days)}" if days else "Weekly on Sun"
    if habit.frequency == 'custom':
        return f"On {', '.join(WEEKDAYS[d] for d in sorted(days))}" if days else "No days selected"
    return habit.frequency


def _schedule_inputs(key, frequency=None, custom_days=None):
    """Frequency selector plus weekday picker. Returns (frequency, custom_days)."""
    keys = list(FREQUENCY_OPTIONS.keys())
    index = keys.index(frequency) if frequency in keys else 0
    frequency = st.selectbox(
        "Frequency",
        options=keys,
        format_func=lambda x: FREQUENCY_OPTIONS[x],
        index=index,
        key=f"{key}_freq",
    )

    selected = None
    if frequency == "weekly":
        default = [WEEKDAYS[d] for d in custom_days] if custom_days else ["Sun"]
        days = st.multiselect("Which Day(s)?", WEEKDAYS, default=default, key=f"{key}_weekly_days")
        selected = [WEEKDAYS.index(d) for d in days] or None
    elif frequency == "custom":
        default = [WEEKDAYS[d] for d in custom_days] if custom_days else ["Mon", "Wed", "Fri"]
        days = st.multiselect("Select Days", WEEKDAYS, default=default, key=f"{key}_custom_days")
        selected = [WEEKDAYS.index(d) for d in days]
    return frequency, selected


def render_add_habit_form():
    """Render form to add a new habit (Interactive, no st.form)."""
    st.subheader("New Habit Goal")
    title = st.text_input("What habit do you want to build?", placeholder="e.g., Read Book").strip()

    col1, col2 = st.columns(2)
    with col1:
        category = st.selectbox("Category", HABIT_CATEGORIES)
        emoji = st.selectbox("Emoji", HABIT_EMOJIS)
    with col2:
        frequency, custom_days = _schedule_inputs("add")

    if st.button("Create Habit 🚀", type="primary"):
        if not title:
            st.error("Please enter a habit name.")
            return None
        if frequency == "custom" and not custom_days:
            st.error("Please select at least one day.")
            return None

        return {
            "title": title,
            "emoji": emoji,
            "category": category,
            "frequency": frequency,
            "custom_days": custom_days,
        }
    return None


def render_edit_habit_form(habit):
    """Render form to edit an existing habit."""
    st.subheader(f"Edit Habit: {habit.emoji} {habit.title}")

    col_name, col_cat = st.columns([2, 1])
    with col_name:
        title = st.text_input("Name", value=habit.title, key=f"edit_name_{habit.id}")
    with col_cat:
        cat_index = HABIT_CATEGORIES.index(habit.category) if habit.category in HABIT_CATEGORIES else 0
        category = st.selectbox("Category", HABIT_CATEGORIES, index=cat_index, key=f"edit_cat_{habit.id}")

    col1, col2 = st.columns(2)
    with col1:
        emoji_index = HABIT_EMOJIS.index(habit.emoji) if habit.emoji in HABIT_EMOJIS else 0
        emoji = st.selectbox("Emoji", HABIT_EMOJIS, index=emoji_index, key=f"edit_emoji_{habit.id}")
    with col2:
        frequency, custom_days = _schedule_inputs(f"edit_{habit.id}", habit.frequency, habit.custom_days)

    if st.button("Save Changes 💾", key=f"save_{habit.id}"):
        if not title.strip():
            st.error("Please enter a habit name.")
            return None
        return {
            "title": title.strip(),
            "emoji": emoji,
            "category": category,
            "frequency": frequency,
            "custom_days": custom_days,
        }
    return None


def render_habit_card(habit, today, on_toggle, on_move=None, position=0, count=1):
    """
    Renders a card for a single habit with its streak and a done/undo toggle.
    `on_move(habit_id, new_index)` enables the up/down reorder buttons.
    """
    stats = get_habit_stats(habit, today)

    with st.container(border=True):
        c1, c2, c3 = st.columns([6, 1, 1])

        with c1:
            st.markdown(f"#### {habit.emoji} {habit.title}")
            st.caption(
                f"{habit.category}  •  📅 {format_frequency(habit)}  •  "
                f"🔥 {stats.current_streak} day streak  •  🏆 best {stats.best_streak}"
            )

        with c2:
            st.write("")  # Spacer
            label = "✅" if stats.is_completed_today else "Done"
            help_text = "Undo today's check-in" if stats.is_completed_today else "Mark as Done"
            if st.button(label, key=f"btn_{habit.id}", help=help_text):
                on_toggle(habit.id)
                st.rerun()

        with c3:
            if on_move is not None:
                if st.button("⬆️", key=f"up_{habit.id}", disabled=position == 0):
                    on_move(habit.id, position - 1)
                    st.rerun()
                if st.button("⬇️", key=f"down_{habit.id}", disabled=position >= count - 1):
                    on_move(habit.id, position + 1)
                    st.rerun()


def render_badges(badges):
    cols = st.columns(3)
    for idx, badge in enumerate(badges):
        with cols[idx % 3]:
            with st.container(border=True):
                icon = badge.icon if badge.unlocked else "🔒"
                st.markdown(f"### {icon} {badge.name}")
                st.caption(badge.description)
                if badge.unlocked and badge.unlocked_at:
                    st.caption(f"Unlocked {badge.unlocked_at:%d %b %Y}")


def render_analytics(habits, today):
    if not habits:
        st.info("No data yet. Start tracking habits!")
        return

    st.subheader("📊 Analytics Dashboard")

    # Calculate per-habit metrics for table
    metrics = []
    for habit in habits:
        stats = get_habit_stats(habit, today)
        metrics.append({
            "Name": f"{habit.emoji} {habit.title}",
            "Streak": stats.current_streak,
            "Best Streak": stats.best_streak,
            "Total": stats.total_completions,
            "7 Day Rate": stats.completion_rate_7,
            "30 Day Rate": stats.completion_rate_30,
        })
    df_metrics = pd.DataFrame(metrics)

    # --- GLOBAL METRICS ---
    m1, m2, m3 = st.columns(3)
    m1.metric("Active Habits", len(habits))
    m2.metric("Total Check-ins", int(df_metrics["Total"].sum()))
    m3.metric("Avg 30 Day Rate", f"{df_metrics['30 Day Rate'].mean():.1f}%")

    st.divider()

    # --- WEEKLY RHYTHM ---
    st.markdown("### 📅 Weekly Rhythm")
    st.caption("Which days are you most consistent?")
    day_stats = get_day_of_week_stats(habits)

    if not day_stats.empty:
        fig = px.bar(day_stats, x='Day', y='Completions',
                     color='Completions', color_continuous_scale='Viridis')
        fig.update_layout(xaxis_title=None, yaxis_title=None, showlegend=False, height=300)
        st.plotly_chart(fig, width="stretch")
    else:
        st.info("Not enough data to show weekly rhythm.")

    st.divider()

    # --- HABIT PERFORMANCE TABLE ---
    st.markdown("### 🏆 Habit Leaderboard")
    st.dataframe(
        df_metrics.sort_values("30 Day Rate", ascending=False).style.format(
            {"7 Day Rate": "{}%", "30 Day Rate": "{}%"}
        ),
        width="stretch",
        hide_index=True
    )
