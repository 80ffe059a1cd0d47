class TranspileError(Exception):
    def __init__(self, message: str, line: int = 0, context: str = ""):
        self.message = message
        self.line = line
        self.context = context
        super().__init__(self._format())

    def _format(self) -> str:
        text = f"Line {self.line}: {self.message}" if self.line else self.message
        if self.context:
            text = f"{text}: {self.context}"
        return text

    def with_location(self, line: int = 0, context: str = "") -> "TranspileError":
        """Attach a line number and/or the offending source line"""
        if line:
            self.line = line
        if context and not self.context:
            self.context = context
        self.args = (self._format(),)
        return self

class UnsupportedInstruction(TranspileError):
    """Instruction line the translator has no rule for"""

class UnsupportedMnemonic(UnsupportedInstruction):
    def __init__(self, mnemonic: str, line: int = 0, context: str = ""):
        self.mnemonic = mnemonic
        super().__init__(f"unsupported mnemonic '{mnemonic}'", line, context)

class UnsupportedOperandShape(UnsupportedInstruction):
    def __init__(self, mnemonic: str, operands, line: int = 0, context: str = ""):
        self.mnemonic = mnemonic
        self.operands = tuple(operands)
        shape = ", ".join(self.operands) if self.operands else "no operands"
        super().__init__(f"unsupported operands for {mnemonic}: {shape}", line, context)

class UnsupportedOperand(TranspileError):
    def __init__(self, token: str, reason: str = "unsupported operand", line: int = 0, context: str = ""):
        self.token = token
        super().__init__(f"{reason} '{token}'", line, context)

class MalformedImmediate(UnsupportedOperand):
    def __init__(self, token: str, line: int = 0, context: str = ""):
        super().__init__(token, "malformed immediate", line, context)

class MalformedRegister(UnsupportedOperand):
    def __init__(self, token: str, line: int = 0, context: str = ""):
        super().__init__(token, "malformed register", line, context)
