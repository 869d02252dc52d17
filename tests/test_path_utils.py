import pytest

from canvas_sync.exceptions import InvalidCourseError
from canvas_sync.utils.path import build_local_path, parse_course_id, sanitize_path


def test_sanitize_replaces_only_unsafe_characters():
    assert sanitize_path("Quiz: Week 1?.pdf") == "Quiz_ Week 1_.pdf"
    assert sanitize_path('a*b"c<d>e|f\\g') == "a_b_c_d_e_f_g"


def test_sanitize_keeps_everything_else():
    name = "80071/course files/Lab (2) — résumé & notes [final].tar.gz"
    assert sanitize_path(name) == name


def test_build_local_path():
    assert build_local_path("80071", "course files/Week 1/", "Q: 1.pdf") == (
        "80071/course files/Week 1/Q_ 1.pdf"
    )
    assert build_local_path("80071", "", "readme.md") == "80071/readme.md"


@pytest.mark.parametrize(
    "course",
    [
        "80071",
        " 80071 ",
        "https://oc.sjtu.edu.cn/courses/80071/files",
        "https://oc.sjtu.edu.cn/courses/80071/files/folder/Week%201",
        "oc.sjtu.edu.cn/courses/80071",
    ],
)
def test_parse_course_id(course):
    assert parse_course_id(course) == "80071"


@pytest.mark.parametrize("course", ["", "abc", "https://oc.sjtu.edu.cn/files"])
def test_parse_course_id_rejects_garbage(course):
    with pytest.raises(InvalidCourseError):
        parse_course_id(course)
