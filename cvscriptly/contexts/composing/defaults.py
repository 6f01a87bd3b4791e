"""
Default values for CVSCRIPTLY resumes.

Provides the template-default resume a new session starts from. Every field is
placeholder content meant to be overwritten by the user.
"""

from typing import Any, Dict

from cvscriptly.contexts.composing.resume_data_structure import SECTION_KEYS, ResumeData

DEFAULT_PERSONAL_DETAILS = {
    "name": "John Doe",
    "location": "Your Location",
    "email": "youremail@yourdomain.com",
    "phone": "0541 999 99 99",
    "website": "yourwebsite.com",
    "linkedin": "linkedin.com/in/yourusername",
    "github": "github.com/yourusername",
}

DEFAULT_SUMMARY = (
    "Software engineer with a track record of shipping desktop and collaboration "
    "features used by millions. Comfortable across the stack from rendering "
    "pipelines to storage formats."
)


def get_default_resume_dict() -> Dict[str, Any]:
    """
    Get the template-default resume in the wire format.

    Returns a fresh dict on every call so callers may modify it freely.
    """
    return {
        "personalDetails": dict(DEFAULT_PERSONAL_DETAILS),
        "summary": DEFAULT_SUMMARY,
        "education": [
            {
                "id": "edu1",
                "university": "University of Pennsylvania",
                "degree": "BS in Computer Science",
                "startDate": "Sept 2000",
                "endDate": "May 2005",
                "gpa": "3.9/4.0",
                "coursework": [
                    "Computer Architecture",
                    "Comparison of Learning Algorithms",
                    "Computational Theory",
                ],
            },
        ],
        "experience": [
            {
                "id": "exp1",
                "role": "Software Engineer",
                "company": "Apple",
                "location": "Cupertino, CA",
                "startDate": "June 2005",
                "endDate": "Aug 2007",
                "highlights": [
                    "Reduced time to render user buddy lists by 75% by implementing a prediction algorithm",
                    "Integrated iChat with Spotlight Search by creating a tool to extract metadata from saved chat transcripts",
                    "Redesigned chat file format and implemented backward compatibility for search",
                ],
            },
            {
                "id": "exp2",
                "role": "Software Engineer Intern",
                "company": "Microsoft",
                "location": "Redmond, WA",
                "startDate": "June 2003",
                "endDate": "Aug 2003",
                "highlights": [
                    "Designed a UI for the VS open file switcher (Ctrl-Tab) and extended it to tool windows",
                    "Created a service to provide gradient across VS and VS add-ins, optimizing its performance via caching",
                ],
            },
        ],
        "projects": [
            {
                "id": "proj1",
                "name": "Multi-User Drawing Tool",
                "url": "github.com/name/repo",
                "description": (
                    "Developed an electronic classroom where multiple users can simultaneously "
                    'view and draw on a "chalkboard" with each person\'s edits synchronized'
                ),
                "tools": ["C++", "MFC"],
            },
            {
                "id": "proj2",
                "name": "Synchronized Desktop Calendar",
                "url": "github.com/name/repo",
                "description": (
                    "Developed a desktop calendar with globally shared and synchronized "
                    "calendars, allowing users to schedule meetings with other users"
                ),
                "tools": ["C#", ".NET", "SQL", "XML"],
            },
        ],
        "customSections": [],
        "skills": [
            {
                "id": "skills1",
                "category": "Programming Languages",
                "skills": ["C++", "C", "Java", "Objective-C", "C#", "SQL", "JavaScript"],
            },
            {
                "id": "skills2",
                "category": "Technologies",
                "skills": [".NET", "Microsoft SQL Server", "XCode", "Interface Builder"],
            },
        ],
        "sectionOrder": list(SECTION_KEYS),
    }


def default_resume() -> ResumeData:
    """Template-default resume snapshot with the Default theme."""
    return ResumeData.from_dict(get_default_resume_dict())
