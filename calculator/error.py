


class MathError(Exception):
    def __init__(self, message, code="9999", equation=None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.equation = equation

class InvalidExpression(MathError):
    pass

class DivisionByZero(MathError):
    pass





Error_Dictionary= {

    "3" : "Calculator Error",
    "4" : "UI Error",
    "7" : "Runtime Error",
    "9" : "Unexpected Error"

}

#Error Messages are structured in:
# 1. Digit: Main Error
# 2. Digit: Specification
# 3. and 4. Digit: Error Number



ERROR_MESSAGES = {
    "3000" : "Empty expression.",
    "3001" : "Mixed decimal separators found.",
    "3002" : "Unbalanced brackets.",
    "3003" : "Division by Zero",
    "3004" : "Invalid character: ", # + character
    "3005" : "Nothing to calculate - only one number provided.",
    "3006" : "No numbers in expression.",
    "3007" : "Invalid number format: ", # + number
    "3008" : "Missing Number.",
    "3009" : "Brackets nested too deeply.",


    "4002" : "Calculation already Running!",
    "4003" : "No Value in ANS",
    "4501" : "Not all Settings could be saved: ", # + Error raising setting



    "9999" : "Unexpected Error: " #+error
}


def describe(code):
    """Return the table message for an error code, or the generic text for unknown codes."""
    return ERROR_MESSAGES.get(code, "Unknown error")
