class ConflictError(Exception):
    """A write collided with an existing row; nothing was persisted."""


class DuplicateEmailError(ConflictError):
    def __init__(self, email):
        super().__init__("User already exists")
        self.email = email


class DuplicateRollNumberError(ConflictError):
    def __init__(self, class_name, roll_no):
        super().__init__(f"Roll number {roll_no} already exists in class {class_name}")
        self.class_name = class_name
        self.roll_no = roll_no
