#!/usr/bin/env python3
"""
FitPlanner - Streamlit Web Interface
Main entry point for the web application.
"""

import importlib
import os
import sys

import streamlit as st

# Ensure pages directory is in Python path
sys.path.insert(0, os.path.dirname(__file__))

from fitplanner.app_context import build_context
from fitplanner.config import configure_logging, load_config, load_environment
from fitplanner.errors import ConfigurationError, PersistenceError

DEV_MODE = os.environ.get('DEV_MODE', '0') == '1'

try:
    import pages

    auth_page = importlib.import_module('pages.auth')
    profile_setup = importlib.import_module('pages.profile_setup')
    profile_page = importlib.import_module('pages.profile')
    generate_plan = importlib.import_module('pages.generate_plan')
    view_plans = importlib.import_module('pages.view_plans')
    tracker = importlib.import_module('pages.tracker')
    progress = importlib.import_module('pages.progress')

    # Reload modules only in dev mode to pick up code changes
    if DEV_MODE:
        for module in (auth_page, profile_setup, profile_page, generate_plan, view_plans, tracker, progress):
            importlib.reload(module)
except ImportError as e:
    st.error(f"Critical error loading pages: {e}")
    st.stop()

st.set_page_config(
    page_title="FitPlanner",
    page_icon="💪",
    layout="wide",
    initial_sidebar_state="expanded"
)

PAGES = {
    'tracker': tracker,
    'generate': generate_plan,
    'plans': view_plans,
    'progress': progress,
    'profile': profile_page,
    'profile_setup': profile_setup,
}


def _on_auth_change(state):
    # Every sign-in or sign-out starts from the default page.
    if not state.loading:
        st.session_state.pop('current_page', None)


def get_context():
    """Build the per-session context once and keep it in session state."""
    if 'app_context' not in st.session_state:
        load_environment()
        config = load_config()
        configure_logging(config)
        ctx = build_context(config, st.secrets)
        ctx.auth_session.subscribe(_on_auth_change)
        st.session_state.app_context = ctx
    return st.session_state.app_context


try:
    ctx = get_context()
except ConfigurationError as e:
    st.error(f"❌ Configuration error: {e}")
    st.stop()
except PersistenceError as e:
    st.error(f"❌ Could not open the workout database: {e}")
    st.stop()

st.markdown("""
    <style>
    .main-header {
        font-size: 2.25rem;
        font-weight: 700;
        margin-bottom: 0.5rem;
    }

    .sub-header {
        font-size: 1.05rem;
        color: #657786;
        margin-bottom: 1.5rem;
    }

    @media (max-width: 768px) {
        .main-header {
            font-size: 1.75rem;
        }

        .stButton button {
            width: 100% !important;
        }

        .stTextInput input,
        .stNumberInput input {
            font-size: 16px !important; /* Prevents zoom on iOS */
        }
    }
    </style>
""", unsafe_allow_html=True)

# Auth gate
if ctx.user is None:
    auth_page.show(ctx)
    st.stop()

if 'current_page' not in st.session_state:
    st.session_state.current_page = 'tracker'
if 'dark_mode' not in st.session_state:
    st.session_state.dark_mode = False

# Onboarding gate
try:
    has_profile = ctx.store.load_profile(ctx.user.id) is not None
except PersistenceError as e:
    st.error(f"❌ Could not load your profile: {e}")
    st.stop()

if not has_profile:
    profile_setup.show(ctx)
    st.stop()


def _nav(label, page, key):
    if st.button(label, width="stretch", key=key,
                 type="primary" if st.session_state.current_page == page else "secondary"):
        st.session_state.current_page = page
        st.rerun()


with st.sidebar:
    st.markdown("# 💪 FitPlanner")
    st.markdown("---")

    st.markdown('<div class="nav-section-header">TRAINING</div>', unsafe_allow_html=True)
    _nav("📅 Tracker", 'tracker', "nav_tracker")
    _nav("📈 Progress", 'progress', "nav_progress")

    st.markdown('<div class="nav-section-header">PLANNING</div>', unsafe_allow_html=True)
    _nav("🆕 Generate Plan", 'generate', "nav_generate")
    _nav("📋 View Plans", 'plans', "nav_plans")

    st.markdown("---")
    _nav("👤 Profile", 'profile', "nav_profile")
    st.session_state.dark_mode = st.toggle("Dark mode", value=st.session_state.dark_mode)

    try:
        summary = ctx.store.count_summary(ctx.user.id)
        st.caption(
            f"{summary['tracked_plans']} tracked plans · {summary['sessions']} sessions logged"
        )
    except PersistenceError as e:
        st.caption(f"Summary unavailable: {e}")

    st.markdown("---")
    st.markdown(f"**Signed in as:** {ctx.user.email}")
    if st.button("Sign out", width="stretch", key="nav_sign_out"):
        ctx.auth_provider.sign_out()
        for key in list(st.session_state.keys()):
            if key != 'app_context':
                del st.session_state[key]
        st.rerun()

# Main content area - route to different pages
page = PAGES.get(st.session_state.current_page, tracker)
page.show(ctx)
