import streamlit as st
from datetime import datetime


class SessionManager:
    @staticmethod
    def initialize_session():
        if "user" not in st.session_state:
            st.session_state.user = None
        if "active_chatbot" not in st.session_state:
            st.session_state.active_chatbot = None
        if "chatbot_messages" not in st.session_state:
            st.session_state.chatbot_messages = {}

    @staticmethod
    def sign_in(user: dict):
        st.session_state.user = user
        st.session_state.chatbot_messages = {}

    @staticmethod
    def sign_out():
        st.session_state.user = None
        st.session_state.active_chatbot = None
        st.session_state.chatbot_messages = {}

    @staticmethod
    def add_message(chatbot_id: str, role: str, content: str):
        if chatbot_id not in st.session_state.chatbot_messages:
            st.session_state.chatbot_messages[chatbot_id] = []

        st.session_state.chatbot_messages[chatbot_id].append({
            "role": role,
            "content": content,
            "timestamp": datetime.now().strftime("%H:%M")
        })
