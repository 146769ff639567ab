"""
The VIEW layer: Qt widgets that render the session and forward user input to
the SessionController.
"""
