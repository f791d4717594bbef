class Member:
    def __init__(self, name, member_id):
        self.name = name
        self.id = int(member_id)

    def __eq__(self, other):
        if not isinstance(other, Member):
            return NotImplemented
        return self.name == other.name and self.id == other.id

    def __hash__(self):
        return hash((self.name, self.id))

    def __repr__(self):
        return f"Member(name={self.name!r}, id={self.id})"

    def to_json(self):
        return {
            "name": self.name,
            "id": self.id,
        }
