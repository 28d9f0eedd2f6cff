"""
Shared, cross-cutting code for the API and the operator scripts.

`core/` holds small building blocks that multiple features use (settings,
logging, the result envelope, DB wiring, and the IntakeQ / SFTP clients).
Keep route-specific flow in the corresponding feature package
(e.g. `intakes/`).
"""
