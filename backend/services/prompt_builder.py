"""All prompt templates for Gemini API calls."""

import json

from models.schemas.resume_data import ResumeClaims


def build_verification_prompt(claims: ResumeClaims) -> str:
    """Resume credibility assessment.

    The claims are embedded as JSON so the model sees the same structure the
    subject submitted.
    """
    resume_json = json.dumps(claims.model_dump(exclude_none=True), indent=2)

    return f"""You are an expert resume verifier and career analyst. Analyze the following resume data and provide a comprehensive verification report.

RESUME DATA:
---
{resume_json}
---

CONSIDER:
1. Consistency between skills, projects, and experience
2. Timeline coherence (no overlapping dates, logical progression)
3. Specificity of descriptions (vague claims vs. concrete achievements)
4. Technical accuracy (skills match described work)
5. Common red flags (employment gaps, unrealistic claims, buzzword stuffing)

Respond with ONLY valid JSON (no markdown, no code fences) in this exact structure:
{{
  "score": <integer 0-100 representing overall credibility>,
  "overallAssessment": "<detailed assessment of the resume's authenticity and quality>",
  "skillsAnalysis": [
    {{
      "skill": "<skill name>",
      "verified": <boolean>,
      "confidence": <number 0-100>,
      "evidence": "<how this skill was verified or why it couldn't be>"
    }}
  ],
  "educationAnalysis": [
    {{"institution": "<institution name>", "verified": <boolean>, "confidence": <number 0-100>}}
  ],
  "experienceAnalysis": [
    {{"company": "<company name>", "verified": <boolean>, "confidence": <number 0-100>}}
  ],
  "redFlags": [<concerning patterns or inconsistencies>],
  "strengths": [<notable positive aspects of the resume>],
  "recommendations": [<suggestions for improvement>]
}}"""


def build_question_prompt(skill: str, count: int) -> str:
    """Multiple-choice skill test generation."""
    return f"""Generate {count} multiple choice questions to test knowledge of: {skill}

REQUIREMENTS:
- Exactly {count} questions
- Each question has exactly 4 options
- Questions range from beginner to advanced difficulty
- Include practical scenarios where applicable
- Provide a clear explanation for each correct answer

Respond with ONLY valid JSON (no markdown, no code fences) in this exact structure:
{{
  "questions": [
    {{
      "question": "<question text>",
      "options": ["<option 1>", "<option 2>", "<option 3>", "<option 4>"],
      "correctAnswer": <0-3 index of the correct option>,
      "explanation": "<why this answer is correct>"
    }}
  ]
}}"""


def build_skill_match_prompt(skills: list[str], job_description: str) -> str:
    return f"""Analyze the match between these candidate skills and job requirements.

CANDIDATE SKILLS: {', '.join(skills)}

JOB DESCRIPTION:
---
{job_description}
---

Respond with ONLY valid JSON (no markdown, no code fences) in this exact structure:
{{
  "matchScore": <integer 0-100>,
  "matchedSkills": [<matching skills>],
  "missingSkills": [<required but missing skills>],
  "recommendations": [<how to improve the match>]
}}"""


def build_career_advice_prompt(claims: ResumeClaims) -> str:
    resume_json = json.dumps(claims.model_dump(exclude_none=True), indent=2)

    return f"""As a career advisor, analyze this resume and provide personalized career advice:

{resume_json}

Provide advice on:
1. Skill gaps to address
2. Career path recommendations
3. Industry trends to consider
4. Networking suggestions
5. Learning resources

Keep the response concise and actionable. Plain text, no JSON."""
