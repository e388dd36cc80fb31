"""Browser automation for playback (Playwright).

``session`` defines the ``SessionDriver`` facade the engine talks to;
``playwright_driver`` implements it. ``navigation``, ``frames`` and
``elements`` hold the page-level helpers the driver and the event
handlers share.
"""
