from .document_store import DocumentStore, InMemoryDocumentStore, PostgresDocumentStore
from .completion import StructuredCompletionClient, OpenAIStructuredCompletionClient
from .feedback_ai import create_feedback
from .interview_queries import get_interview, get_feedback, get_latest_interviews, get_user_interviews
