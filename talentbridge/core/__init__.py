"""
Core business logic modules for TalentBridge.

Submodules:
- commission: Platform/recruiter commission split
- workflow: Application state machine, duplicate validation and orchestration
- exceptions: Error taxonomy
"""
