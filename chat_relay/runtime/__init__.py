"""Runtime package.

Builds the process-wide dependencies (settings, generation client, transcript
store, session registry) and configures logging.
"""

__all__: list[str] = []
