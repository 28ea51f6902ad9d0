import typing as t

# identifiers are allocated by the host gradebook
CourseID = t.NewType("CourseID", int)
GradeItemID = t.NewType("GradeItemID", int)
UserID = t.NewType("UserID", int)
