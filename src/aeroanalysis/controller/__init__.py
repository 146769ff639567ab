"""
The CONTROLLER layer drives the model over time (timer, background worker)
and talks to the outside world (the text-generation service).
"""
