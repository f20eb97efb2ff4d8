"""
Streamlit rendering helpers shared by the pages.
"""

import html

import streamlit as st

from fitplanner.design_system import (
    get_colors,
    get_day_card_html,
    get_empty_state_html,
    get_metric_card_html,
    get_stat_grid_html,
    get_step_indicator_html,
)


def render_page_header(title, subtitle=None):
    """
    Render standardized page header with title and optional subtitle.

    Args:
        title: Main page title
        subtitle: Optional subtitle text
    """
    st.markdown(f'<div class="main-header">{html.escape(title)}</div>', unsafe_allow_html=True)
    if subtitle:
        st.markdown(f'<div class="sub-header">{html.escape(subtitle)}</div>', unsafe_allow_html=True)


FLASH_KEY = "flash_message"


def set_flash(message):
    """Queue a success message for the next run, so it survives ``st.rerun()``."""
    st.session_state[FLASH_KEY] = message


def show_flash():
    message = st.session_state.pop(FLASH_KEY, None)
    if message:
        st.success(message)
    return message


def nav_button(label, page_name, **kwargs):
    """
    Navigation button that switches ``current_page`` and reruns.

    Returns:
        bool: True if button was clicked
    """
    if st.button(label, **kwargs):
        st.session_state.current_page = page_name
        st.rerun()
        return True
    return False


def metric_card(label, value, caption=None):
    st.markdown(get_metric_card_html(label, value, caption, get_colors()), unsafe_allow_html=True)


def empty_state(title, description):
    st.markdown(get_empty_state_html(title, description, get_colors()), unsafe_allow_html=True)


def stat_grid(stats):
    """
    Render grid layout for stats.

    Args:
        stats: List of dicts with 'label' and 'value' keys
    """
    st.markdown(get_stat_grid_html(stats, get_colors()), unsafe_allow_html=True)


def step_indicator(current_step, total_steps, title):
    st.markdown(
        get_step_indicator_html(current_step, total_steps, title, get_colors()),
        unsafe_allow_html=True,
    )


def day_card(day_label, date_label, title, subtitle, is_today=False, is_completed=False, is_selected=False):
    st.markdown(
        get_day_card_html(
            day_label,
            date_label,
            title,
            subtitle,
            is_today=is_today,
            is_completed=is_completed,
            is_selected=is_selected,
            color_scheme=get_colors(),
        ),
        unsafe_allow_html=True,
    )
