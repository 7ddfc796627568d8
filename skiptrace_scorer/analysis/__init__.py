"""
Narrative lead analysis through a chat-completion service.

Modules
-------
completion_client : CompletionClient (sync + async), raises AnalysisUnavailable.
prompts           : SYSTEM_PROMPT + build_lead_prompt().
analyzer          : analyze_lead() / analyze_leads() with fallback text.
"""
