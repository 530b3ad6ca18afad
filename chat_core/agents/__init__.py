from chat_core.agents.orchestrator import ConversationOrchestrator, OrchestratorState, TurnResult

__all__ = ["ConversationOrchestrator", "OrchestratorState", "TurnResult"]
