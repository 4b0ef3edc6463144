import streamlit as st
from services.api_client import APIClient
from services.auth_client import AuthClient, AuthError
from services.session_manager import SessionManager


def login_form():
    with st.sidebar:
        st.title("Iniciar sesión")
        with st.form(key="login_form"):
            email = st.text_input("Email")
            password = st.text_input("Contraseña", type="password")
            cols = st.columns(2)
            sign_in = cols[0].form_submit_button("Entrar")
            sign_up = cols[1].form_submit_button("Registrarse")
            reset = st.form_submit_button("¿Olvidaste tu contraseña?")

        if reset:
            if not email:
                st.warning("Ingresa tu email para restablecer la contraseña")
                return
            try:
                AuthClient().send_password_reset(email)
            except AuthError as e:
                st.error(f"No se pudo enviar el email: {e}")
                return
            st.success("Te enviamos un email para restablecer tu contraseña")
            return

        if (sign_in or sign_up) and email and password:
            auth = AuthClient()
            try:
                user = auth.sign_up(email, password) if sign_up else auth.sign_in(email, password)
            except AuthError as e:
                st.error(f"Error de autenticación: {e}")
                return
            SessionManager.sign_in(user)
            st.rerun()


def show_sidebar(api_client: APIClient):
    with st.sidebar:
        st.title("Mis chatbots")
        st.caption(st.session_state.user.get("email") or "")

        chatbots = api_client.fetch_chatbots()
        chatbot_names = {
            chatbot["id"]: chatbot.get("name") or chatbot["id"]
            for chatbot in chatbots
        }

        selected_chatbot_id = None
        if chatbot_names:
            selected_chatbot_id = st.selectbox(
                "Selecciona un chatbot:",
                options=list(chatbot_names.keys()),
                format_func=lambda chatbot_id: chatbot_names[chatbot_id],
                key="chatbot_selector"
            )
        else:
            st.write("Todavía no creaste ningún chatbot")

        st.markdown("---")
        if st.button("Cerrar sesión", use_container_width=True):
            SessionManager.sign_out()
            st.rerun()

        return selected_chatbot_id
