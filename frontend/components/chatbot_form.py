import streamlit as st

PROVIDERS = {
    "Google Gemini": "google",
    "OpenAI": "openai",
}


def chatbot_form(api_client):
    with st.expander("Crear un chatbot nuevo", expanded=False):
        templates = api_client.fetch_templates()
        if not templates:
            st.warning("No hay plantillas disponibles")
            return

        with st.form(key="chatbot_form", clear_on_submit=True):
            name = st.text_input("Nombre")
            purpose = st.text_input(
                "Propósito", placeholder="customer support agent")
            provider_label = st.selectbox("Proveedor", list(PROVIDERS.keys()))
            model = st.text_input("Modelo (opcional)")
            embedding_model = st.text_input("Modelo de embeddings (opcional)")
            template = st.selectbox("Plantilla", templates)
            api_key = st.text_input("API key", type="password")
            document_content = st.text_area("Documento", height=240)
            submitted = st.form_submit_button("Guardar")

        if submitted:
            if not api_key or not document_content.strip():
                st.error("La API key y el documento son obligatorios")
                return
            chatbot_id = api_client.create_chatbot({
                "name": name,
                "purpose": purpose,
                "modelProvider": PROVIDERS[provider_label],
                "model": model,
                "embeddingModel": embedding_model,
                "template": template,
                "apiKey": api_key,
                "documentType": "text",
                "documentContent": document_content,
            })
            if chatbot_id:
                st.success(f"Chatbot '{name or chatbot_id}' guardado")
                st.rerun()
