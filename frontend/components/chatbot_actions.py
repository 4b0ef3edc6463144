import streamlit as st


def chatbot_actions(api_client, chatbot_id: str):
    st.subheader("Publicar")
    cols = st.columns(3)

    if cols[0].button("Generar archivos", key=f"generate_{chatbot_id}", use_container_width=True):
        with st.spinner("Generando..."):
            result = api_client.generate_chatbot(chatbot_id)
        if result:
            st.success(result.get("message", "Archivos generados"))

    if cols[1].button("Preparar descarga", key=f"zip_{chatbot_id}", use_container_width=True):
        with st.spinner("Empaquetando..."):
            st.session_state[f"zip_{chatbot_id}"] = api_client.download_chatbot(chatbot_id)

    archive = st.session_state.get(f"zip_{chatbot_id}")
    if archive:
        cols[1].download_button(
            "Descargar .zip",
            data=archive,
            file_name=f"chatbot-{chatbot_id}.zip",
            mime="application/zip",
            use_container_width=True
        )

    if cols[2].button("Desplegar", key=f"deploy_{chatbot_id}", use_container_width=True):
        with st.spinner("Subiendo a GitHub y desplegando..."):
            result = api_client.deploy_chatbot(chatbot_id)
        if result:
            st.success(f"Repositorio: {result['repoUrl']}")
            if result.get("serviceUrl"):
                st.markdown(f"Servicio: {result['serviceUrl']}")

    if st.button("Conectar GitHub", key="github_connect"):
        st.session_state["github_login_url"] = api_client.github_login_url()

    login_url = st.session_state.get("github_login_url")
    if login_url:
        st.link_button("Autorizar en GitHub", login_url)
