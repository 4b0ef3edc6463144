import streamlit as st
from services.session_manager import SessionManager
from services.api_client import APIClient
from components.sidebar import login_form, show_sidebar
from components.chatbot_form import chatbot_form
from components.chatbot_actions import chatbot_actions
from components.chat_interface import chat_messages, chat_input

STYLES = """
<style>
.user-message, .assistant-message {
    padding: 8px 12px;
    border-radius: 10px;
    margin: 6px 0;
    max-width: 80%;
}
.user-message { background: #2f6fed; color: white; margin-left: auto; }
.assistant-message { background: #eef1f6; }
.timestamp { font-size: 0.7em; opacity: 0.6; text-align: right; }
</style>
"""


def main():
    st.set_page_config(page_title="Chatbot Builder")
    st.markdown(STYLES, unsafe_allow_html=True)
    SessionManager.initialize_session()
    st.title("Chatbot Builder")

    params = st.query_params
    if params.get("github") == "connected":
        st.success("Cuenta de GitHub conectada")
    elif params.get("github") == "error":
        st.error("No se pudo conectar la cuenta de GitHub")

    user = st.session_state.user
    if not user:
        login_form()
        st.info("Inicia sesión para crear tus chatbots.")
        return

    api_client = APIClient(user_id=user["user_id"], id_token=user["id_token"])
    # Store API client in session state
    st.session_state.api_client = api_client

    selected_chatbot_id = show_sidebar(api_client)
    chatbot_form(api_client)

    if selected_chatbot_id:
        st.session_state.active_chatbot = selected_chatbot_id
        chatbot_actions(api_client, selected_chatbot_id)
        st.markdown("---")
        chat_messages(selected_chatbot_id)
        chat_input(api_client, selected_chatbot_id)


if __name__ == "__main__":
    main()
