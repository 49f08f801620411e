"""
netdiag Core Module

The client-side half of a diagnostic run:
- session: update model, ordered update channel, session controller
- export: copy-to-clipboard and save-to-file over the final buffer
- app: the facade front ends talk to

Usage:
    from core.app import DiagnosticsApp

    app = DiagnosticsApp.create()
    app.startup()
    app.run_diagnostics()
"""
