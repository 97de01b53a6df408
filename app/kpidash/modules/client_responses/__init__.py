"""
Client responses: review ratings, comments and miscellaneous work notes.
"""
