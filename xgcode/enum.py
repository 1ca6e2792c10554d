from enum import Flag


class Compliant(Flag):
    '''How strictly the data must follow the format while unpacking.

    Without flags the mismatches are only logged, so that files slightly off
    can still be inspected and written back untouched.'''
    ENUM    = 1 << 0  # raw values without an enum member are errors
    MAGIC   = 1 << 1  # a signature different from the expected one is an error
    INHERIT = 1 << 2  # ask the father when the flag is not set here
