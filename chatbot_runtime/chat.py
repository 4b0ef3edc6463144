# chatbot_runtime/chat.py
"""Retrieval-augmented chat over a single document.

The document text, purpose and model choice come from the environment
(the ``.env`` written when the chatbot project was generated). The query
engine is built lazily on the first question:

    text -> SentenceSplitter chunks -> embeddings -> in-memory Chroma
         -> top-k retrieval -> purpose prompt -> LLM
"""
import logging
import os
import threading
import uuid
from typing import Mapping, Optional

import chromadb
from llama_index.core import Document, PromptTemplate, StorageContext, VectorStoreIndex
from llama_index.core.node_parser import SentenceSplitter
from llama_index.vector_stores.chroma import ChromaVectorStore
from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1000
CHUNK_OVERLAP = 200
SIMILARITY_TOP_K = 4
NO_CONTENT = "No content provided"
APOLOGY = "I apologize, but I encountered an error processing your request. Please try again."

PROVIDER_DEFAULTS = {
    "google": {"model": "gemini-2.0-flash", "embedding_model": "text-embedding-004"},
    "openai": {"model": "gpt-3.5-turbo", "embedding_model": "text-embedding-3-small"},
}

QA_TEMPLATE = (
    "{purpose_line}\n"
    "\n"
    "Context:\n"
    "{context_str}\n"
    "\n"
    "Visitor's Question:\n"
    "{query_str}\n"
    "\n"
    "Response:\n"
)


class ConfigurationError(RuntimeError):
    pass


class RuntimeConfig(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    api_key: str
    model: str
    model_provider: str = "google"
    purpose: str = ""
    document_type: str = "text"
    document_content: str = NO_CONTENT
    embedding_model: str

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "RuntimeConfig":
        env = os.environ if environ is None else environ
        api_key = env.get("API_KEY")
        if not api_key:
            raise ConfigurationError("API_KEY environment variable is required")

        provider = (env.get("MODEL_PROVIDER") or "google").strip().lower()
        if provider not in PROVIDER_DEFAULTS:
            raise ConfigurationError(f"Unsupported MODEL_PROVIDER: {provider}")
        defaults = PROVIDER_DEFAULTS[provider]

        config = cls(
            api_key=api_key,
            model=env.get("MODEL") or defaults["model"],
            model_provider=provider,
            purpose=env.get("PURPOSE") or "",
            document_type=env.get("DOCUMENT_TYPE") or "text",
            document_content=env.get("DOCUMENT_CONTENT") or NO_CONTENT,
            embedding_model=env.get("EMBEDDING_MODEL") or defaults["embedding_model"],
        )
        logger.info(
            f"Runtime configuration loaded: provider={config.model_provider}, "
            f"model={config.model}, embedding_model={config.embedding_model}, "
            f"document_content={'present' if config.has_content else 'missing'}")
        return config

    @property
    def has_content(self) -> bool:
        return self.document_content != NO_CONTENT

    @property
    def purpose_line(self) -> str:
        if self.purpose:
            return f"You are acting as a {self.purpose}. "
        return "You are a helpful assistant. "


def load_llm(config: RuntimeConfig):
    if config.model_provider == "openai":
        from llama_index.llms.openai import OpenAI
        return OpenAI(model=config.model, api_key=config.api_key, temperature=0.1)
    from llama_index.llms.google_genai import GoogleGenAI
    return GoogleGenAI(model=config.model, api_key=config.api_key)


def load_embed_model(config: RuntimeConfig):
    if config.model_provider == "openai":
        from llama_index.embeddings.openai import OpenAIEmbedding
        return OpenAIEmbedding(model=config.embedding_model, api_key=config.api_key)
    from llama_index.embeddings.google_genai import GoogleGenAIEmbedding
    return GoogleGenAIEmbedding(model_name=config.embedding_model, api_key=config.api_key)


def build_query_engine(config: RuntimeConfig, llm=None, embed_model=None):
    if not config.has_content:
        raise ConfigurationError("DOCUMENT_CONTENT environment variable is required")

    if llm is None:
        llm = load_llm(config)
    if embed_model is None:
        embed_model = load_embed_model(config)

    text = config.document_content.replace("'''", "")
    client = chromadb.EphemeralClient()
    collection = client.get_or_create_collection(
        name=f"chatbot-{uuid.uuid4().hex[:12]}",
        metadata={"hnsw:space": "cosine"}
    )
    storage_context = StorageContext.from_defaults(
        vector_store=ChromaVectorStore(chroma_collection=collection))

    index = VectorStoreIndex.from_documents(
        [Document(text=text)],
        storage_context=storage_context,
        embed_model=embed_model,
        transformations=[SentenceSplitter(
            chunk_size=CHUNK_SIZE, chunk_overlap=CHUNK_OVERLAP)],
        show_progress=False
    )

    prompt = PromptTemplate(QA_TEMPLATE).partial_format(
        purpose_line=config.purpose_line)
    return index.as_query_engine(
        llm=llm,
        similarity_top_k=SIMILARITY_TOP_K,
        text_qa_template=prompt
    )


class ChatService:
    """Answers questions about the configured document."""

    def __init__(self, config: RuntimeConfig, llm=None, embed_model=None):
        self.config = config
        self._llm = llm
        self._embed_model = embed_model
        self._engine = None
        self._lock = threading.Lock()

    @property
    def initialized(self) -> bool:
        return self._engine is not None

    def initialize(self) -> None:
        if self._engine is not None:
            return
        with self._lock:
            if self._engine is None:
                try:
                    self._engine = build_query_engine(
                        self.config, self._llm, self._embed_model)
                except Exception as e:
                    logger.error(f"Error initializing chat: {e}")
                    raise
                logger.info("Chat engine initialized")

    def process_user_message(self, message: str) -> str:
        self.initialize()
        try:
            return str(self._engine.query(message))
        except Exception as e:
            logger.error(f"Error processing message: {e}")
            return APOLOGY


_service: Optional[ChatService] = None
_service_lock = threading.Lock()


def get_chat_service() -> ChatService:
    """Process-wide chat service configured from the environment."""
    global _service
    with _service_lock:
        if _service is None:
            _service = ChatService(RuntimeConfig.from_env())
        return _service
