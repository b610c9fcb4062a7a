"""API package for the HR agent.

This package provides the FastAPI application and the LangGraph agent that
answers HR questions with an employee_lookup retrieval tool and durable
per-thread conversation state.
"""
