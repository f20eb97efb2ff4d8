"""
Design tokens and HTML component builders for the Streamlit pages.
Neutral palette with a single green accent, light and dark variants.
"""

import html

import streamlit as st

COLORS = {
    'primary': '#14171A',
    'accent': '#2E9E5B',
    'accent_soft': '#E6F4EC',
    'background': '#F6F7F8',
    'surface': '#FFFFFF',
    'success': '#2E9E5B',
    'warning': '#E8A33D',
    'error': '#D64545',
    'text_primary': '#14171A',
    'text_secondary': '#657786',
    'border_medium': '#D9DEE3',
    'border_light': '#ECEFF2',
}

COLORS_DARK = {
    'primary': '#F5F8FA',
    'accent': '#3DBE72',
    'accent_soft': '#17301F',
    'background': '#0F1214',
    'surface': '#1A1F23',
    'success': '#3DBE72',
    'warning': '#F0B252',
    'error': '#EF5B5B',
    'text_primary': '#F5F8FA',
    'text_secondary': '#8899A6',
    'border_medium': '#2B3238',
    'border_light': '#38424A',
}


def get_colors():
    """Current color scheme based on the dark mode toggle"""
    return COLORS_DARK if st.session_state.get('dark_mode', False) else COLORS


def get_metric_card_html(label, value, caption=None, color_scheme=None):
    """Single stat card used on the tracker and progress pages"""
    if color_scheme is None:
        color_scheme = get_colors()

    caption_html = ""
    if caption:
        caption_html = (
            f'<div style="font-size: 0.8rem; color: {color_scheme["text_secondary"]}; '
            f'margin-top: 0.25rem;">{html.escape(str(caption))}</div>'
        )

    return f"""
    <div class="metric-card" style="
        background: {color_scheme['surface']};
        border: 1px solid {color_scheme['border_medium']};
        padding: 1rem;
        border-radius: 10px;
    ">
        <div style="font-size: 0.75rem; text-transform: uppercase; font-weight: 700; color: {color_scheme['text_secondary']}; letter-spacing: 0.05em;">{html.escape(str(label))}</div>
        <div style="font-size: 1.75rem; font-weight: 700; color: {color_scheme['text_primary']};">{html.escape(str(value))}</div>
        {caption_html}
    </div>
    """.strip()


def get_empty_state_html(title, description, color_scheme=None):
    """Placeholder shown when a list has nothing to display yet"""
    if color_scheme is None:
        color_scheme = get_colors()

    return f"""
    <div style="
        text-align: center;
        padding: 2.5rem 1.5rem;
        background: {color_scheme['surface']};
        border: 1px dashed {color_scheme['border_medium']};
        border-radius: 14px;
        margin: 1.5rem 0;
    ">
        <div style="font-size: 1.15rem; font-weight: 600; margin-bottom: 0.5rem; color: {color_scheme['text_primary']};">{html.escape(title)}</div>
        <div style="color: {color_scheme['text_secondary']}; line-height: 1.5;">{html.escape(description)}</div>
    </div>
    """.strip()


def get_stat_grid_html(stats, color_scheme=None):
    """Grid of label/value pairs, e.g. exercise stats"""
    if color_scheme is None:
        color_scheme = get_colors()

    cells = ""
    for stat in stats:
        label = html.escape(str(stat.get('label', '')))
        value = html.escape(str(stat.get('value', '')))
        cells += f"""
        <div style="
            border: 1px solid {color_scheme['border_medium']};
            padding: 0.75rem;
            background: {color_scheme['surface']};
            border-radius: 10px;
        ">
            <div style="font-size: 0.7rem; text-transform: uppercase; font-weight: 700; color: {color_scheme['text_secondary']};">{label}</div>
            <div style="font-weight: 700; color: {color_scheme['text_primary']}; font-size: 1.2rem; margin-top: 0.25rem;">{value}</div>
        </div>
        """

    return f"""
    <div style="
        display: grid;
        grid-template-columns: repeat(auto-fit, minmax(120px, 1fr));
        gap: 0.5rem;
        margin: 0.75rem 0;
    ">
        {cells}
    </div>
    """.strip()


def get_completion_badge_html(completed=False, color_scheme=None):
    if color_scheme is None:
        color_scheme = get_colors()

    if completed:
        return f'<span style="color: {color_scheme["success"]}; font-size: 1.1rem;">✓</span>'
    return f'<span style="color: {color_scheme["border_medium"]}; font-size: 1.1rem;">○</span>'


def get_step_indicator_html(current_step, total_steps, title, color_scheme=None):
    """Step x of n header for the profile form"""
    if color_scheme is None:
        color_scheme = get_colors()

    dots = ""
    for step in range(1, total_steps + 1):
        fill = color_scheme['accent'] if step <= current_step else color_scheme['border_light']
        dots += (
            f'<span style="display: inline-block; width: 28px; height: 6px; '
            f'border-radius: 3px; margin-right: 4px; background: {fill};"></span>'
        )

    return f"""
    <div style="margin: 0.5rem 0 1rem 0;">
        <div>{dots}</div>
        <div style="font-size: 0.8rem; color: {color_scheme['text_secondary']}; margin-top: 0.4rem;">Step {current_step} of {total_steps}: {html.escape(title)}</div>
    </div>
    """.strip()


def get_day_card_html(
    day_label,
    date_label,
    title,
    subtitle,
    is_today=False,
    is_completed=False,
    is_selected=False,
    color_scheme=None,
):
    """Week calendar day card used by the tracker."""
    if color_scheme is None:
        color_scheme = get_colors()

    highlighted = is_today or is_selected
    border_color = color_scheme['accent'] if highlighted else color_scheme['border_medium']
    border_width = '2px' if highlighted else '1px'
    background = color_scheme['accent_soft'] if is_selected else color_scheme['surface']

    classes = ["day-card"]
    if is_today:
        classes.append("today")
    if is_selected:
        classes.append("selected")

    completion_icon = get_completion_badge_html(is_completed, color_scheme)

    return f"""<div class="{' '.join(classes)}" style="
        background: {background};
        border: {border_width} solid {border_color};
        border-radius: 10px;
        padding: 0.75rem 0.5rem;
        text-align: center;
        min-height: 104px;
    ">
        <div style="
            font-size: 0.7rem;
            font-weight: 700;
            color: {color_scheme['text_secondary']};
            text-transform: uppercase;
            letter-spacing: 0.5px;
        ">{html.escape(str(day_label))}</div>
        <div style="
            font-size: 0.7rem;
            color: {color_scheme['text_secondary']};
            margin-bottom: 0.5rem;
        ">{html.escape(str(date_label))}</div>
        <div style="
            font-size: 0.85rem;
            font-weight: 600;
            color: {color_scheme['text_primary']};
        ">{html.escape(str(title))}</div>
        <div style="
            font-size: 0.7rem;
            color: {color_scheme['text_secondary']};
        ">{html.escape(str(subtitle))}</div>
        <div style="margin-top: 0.45rem;">{completion_icon}</div>
    </div>""".strip()
