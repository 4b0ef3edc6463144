import streamlit as st
from services.session_manager import SessionManager


def chat_messages(selected_chatbot_id: str):
    st.subheader("Probar chatbot")

    for message in st.session_state.chatbot_messages.get(selected_chatbot_id, []):
        role_class = "user-message" if message["role"] == "user" else "assistant-message"
        st.markdown(f"""
            <div class="{role_class}">
                <div class="message-content">{message["content"]}</div>
                <div class="timestamp">{message["timestamp"]}</div>
            </div>
        """, unsafe_allow_html=True)

    # Process pending message if exists
    if hasattr(st.session_state, 'pending_message'):
        pending = st.session_state.pending_message
        if pending["chatbot_id"] == selected_chatbot_id and not pending.get("processed", False):
            # Mark as processed to prevent loops
            st.session_state.pending_message["processed"] = True
            handle_bot_response(st.session_state.get('api_client'),
                                pending["chatbot_id"],
                                pending["message"])
            del st.session_state.pending_message
            st.rerun()


def chat_input(api_client, selected_chatbot_id: str):
    with st.form(key=f"chat_form_{selected_chatbot_id}", clear_on_submit=True):
        cols = st.columns([6, 1])
        user_input = cols[0].text_input(
            "",
            placeholder="Escribe tu mensaje...",
            key=f"input_{selected_chatbot_id}",
            label_visibility="collapsed"
        )

        if cols[1].form_submit_button("Enviar") and user_input.strip():
            current_message = user_input.strip()
            SessionManager.add_message(selected_chatbot_id, "user", current_message)
            st.session_state.pending_message = {
                "chatbot_id": selected_chatbot_id,
                "message": current_message,
                "processed": False
            }
            st.rerun()


def handle_bot_response(api_client, chatbot_id: str, message: str):
    with st.spinner("Pensando..."):
        response = api_client.send_message(chatbot_id, message)
    if response and "response" in response:
        SessionManager.add_message(chatbot_id, "assistant", response["response"])
    else:
        st.error("Error al procesar la consulta")
