def make_profile(**overrides) -> dict:
    profile = {
        "username": "jane-doe",
        "name": "Jane Doe",
        "title": "Backend Engineer",
        "bio": "I build APIs.",
        "email": "jane@example.com",
        "show_email": True,
        "phone": "+1 555 0100",
        "location": "Berlin",
        "availability": "open-to-offers",
        "theme": "blue",
        "skills": [
            {"name": "Python", "level": "expert", "category": "technical"},
            {"name": "Mentoring", "level": "advanced", "category": "soft"},
        ],
        "socials": {"github": "https://github.com/jane", "linkedin": ""},
        "education": [{"institution": "TU Berlin", "degree": "MSc", "year": "2018"}],
        "experience": [
            {
                "role": "Engineer",
                "company": "Acme",
                "duration": "2019-2024",
                "desc": "Built services\nLed migrations",
                "type": "full-time",
            }
        ],
        "projects": [{"name": "resumin", "desc": "Resume site", "technologies": ["python", "fastapi"]}],
    }
    profile.update(overrides)
    return profile


def make_event(event_type="page_view", session_id="s1", timestamp="2026-10-19T10:00:00Z", **metadata) -> dict:
    return {
        "profile_id": "owner-1",
        "username": "jane-doe",
        "event_type": event_type,
        "timestamp": timestamp,
        "session_id": session_id,
        "metadata": metadata,
    }
