"""
The MODEL layer contains pure data structures and business logic.
It has NO knowledge of the GUI widgets, the timer or the text service.
It deals with the session state, the run timeline, report parsing and export.
"""
