"""
Sign in / sign up page shown before anything else.
"""

import streamlit as st

from fitplanner.errors import AuthError, PersistenceError


def _password_form(ctx, mode):
    label = "Sign In" if mode == "sign_in" else "Create Account"
    with st.form(f"auth_{mode}_form"):
        email = st.text_input("Email", key=f"auth_{mode}_email")
        password = st.text_input("Password", type="password", key=f"auth_{mode}_password")
        submitted = st.form_submit_button(label, type="primary", width="stretch")

    if not submitted:
        return

    try:
        if mode == "sign_in":
            ctx.auth_provider.sign_in_with_password(email, password)
        else:
            ctx.auth_provider.sign_up_with_password(email, password)
    except AuthError as e:
        st.error(str(e))
        return
    except PersistenceError as e:
        st.error(f"❌ Could not reach the account store: {e}")
        return

    st.session_state.current_page = "tracker"
    st.rerun()


def _federated_sign_in(ctx, token):
    try:
        ctx.auth_provider.sign_in_with_federated_provider(token)
    except AuthError as e:
        st.error(str(e))
        return
    except PersistenceError as e:
        st.error(f"❌ Could not reach the account store: {e}")
        return
    st.rerun()


def _google_sign_in(ctx):
    # A Google Identity Services redirect lands here with ?id_token=...
    token = st.query_params.get("id_token")
    if token:
        st.query_params.clear()
        _federated_sign_in(ctx, token)

    if not ctx.auth_provider.google_client_id:
        return

    with st.expander("Sign in with Google"):
        pasted = st.text_input("Google ID token", type="password", key="auth_google_token")
        if st.button("Continue with Google", width="stretch", disabled=not pasted):
            _federated_sign_in(ctx, pasted)


def show(ctx):
    """Render the authentication page"""
    st.markdown(
        """
        <div style="max-width: 420px; margin: 3rem auto 1rem auto; text-align: center;">
            <div style="font-size: 2rem; font-weight: 700; margin-bottom: 0.5rem;">FitPlanner</div>
            <p style="color: #657786;">AI workout plans and a weekly tracker</p>
        </div>
        """,
        unsafe_allow_html=True,
    )

    if ctx.auth_session.state.loading:
        st.info("Signing you in...")

    _, col, _ = st.columns([1, 2, 1])
    with col:
        sign_in_tab, sign_up_tab = st.tabs(["Sign In", "Sign Up"])
        with sign_in_tab:
            _password_form(ctx, "sign_in")
        with sign_up_tab:
            _password_form(ctx, "sign_up")
        _google_sign_in(ctx)
