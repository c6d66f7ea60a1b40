"""
Signal tables for filtering and scoring
- Exclusion phrases (open-to-work, student/junior, hiring, grief)
- Content quality markers (good, low-value, story arc, AI boilerplate, pods)
- Seniority ladder and niche keywords

Tables are plain data so they can be tuned and tested apart from the
algorithms. Bump SIGNALS_VERSION whenever a list changes.
"""

from dataclasses import dataclass
from typing import Tuple

SIGNALS_VERSION = 'v3'


@dataclass(frozen=True)
class SignalTables:
    version: str
    open_to_work: Tuple[str, ...]
    student: Tuple[str, ...]
    job_post: Tuple[str, ...]
    grief: Tuple[str, ...]
    good_content: Tuple[str, ...]
    low_value: Tuple[str, ...]
    story_arc: Tuple[str, ...]
    ai_boilerplate: Tuple[str, ...]
    engagement_pod: Tuple[str, ...]
    niche: Tuple[str, ...]
    # Ordered by points, highest first; first match wins
    seniority: Tuple[Tuple[str, int], ...]
    creator_proxy: Tuple[str, ...]
    investor_proxy: Tuple[str, ...]


OPEN_TO_WORK_SIGNALS = (
    'open to work', 'open to opportunities', '#opentowork', 'open for work',
    '#openforwork', 'actively seeking', 'actively looking', 'available for hire',
    'available for opportunities', 'job seeker', '#jobseeker', 'seeking employment',
    'seeking a role', 'seeking new role', 'looking for a job', 'looking for work',
    'looking for opportunities', 'looking for my next', 'in search of',
    'open for job', '#hireme', '#lookingforjob',
)

STUDENT_SIGNALS = (
    'student', 'undergraduate', 'undergrad', 'bsc student', 'btech student',
    'cs student', 'computer science student', 'engineering student', 'mba student',
    'intern', 'internship', 'fresher', 'fresh graduate', 'recent graduate',
    'new graduate', 'entry level', 'entry-level', 'junior developer',
    'aspiring developer', 'aspiring engineer', 'aspiring professional',
    'aspiring data scientist', 'aspiring software engineer', 'career break',
    'career switch', 'career transition', 'bootcamp', 'coding bootcamp',
    'self-taught', 'self taught', 'learning to code', 'learning programming',
)

JOB_POST_SIGNALS = (
    "we're hiring", 'we are hiring', 'now hiring', 'join our team', 'apply now',
    'apply here', 'send your cv', 'send your resume', 'dm me your cv',
    'link in comments to apply', 'job opening', 'job opportunity', 'job vacancy',
    'open position', 'open role', 'currently hiring', '#hiring', '#jobopening',
    '#vacancy', '#recruitment', '#recruiting',
)

GRIEF_SIGNALS = (
    'lost my', 'passed away', 'rest in peace', 'rip ', 'we lost',
    'diagnosed with', 'cancer', 'funeral', 'grieving', 'in mourning',
    'laid off today', 'just got laid off', 'just lost my job',
    'health crisis', 'mental breakdown', 'suicide', 'depression',
    'struggling mentally', 'lost someone', 'tragedy', 'devastating news',
)

GOOD_CONTENT_SIGNALS = (
    'startup', 'founder', 'product', 'engineering', 'developer', 'software',
    'ai', 'machine learning', 'devops', 'architecture', 'design', 'backend',
    'leadership', 'team', 'lesson', 'learned', 'mistake', 'failure',
    'growth', 'scale', 'strategy', 'decision', 'insight', 'opinion',
    'built', 'shipped', 'launched', 'revenue', 'mrr', 'bootstrap',
    'open source', 'automation', 'workflow', 'experience', 'story',
)

LOW_VALUE_SIGNALS = (
    'motivational quote', 'agree?', 'share if you agree',
    'repost if', 'double tap', 'humble', 'blessed', 'grateful for',
    'like if', 'comment below', 'what do you think?',
)

STORY_ARC_SIGNALS = (
    'started', 'failed', 'learned', 'realized', 'after 3 years', 'in 2020',
    'in 2021', 'in 2022', 'we almost', 'i almost',
)

AI_BOILERPLATE_SIGNALS = (
    'in today’s fast paced world', 'in todays fast paced world',
    "in today's fast-paced world", "in today's fast paced world",
    'as we navigate', 'it is important to', 'here are 5 lessons',
    'here are 3 lessons', 'delve into', "let's dive in",
)

ENGAGEMENT_POD_SIGNALS = (
    'nice one bro', 'dm sent', 'check inbox', 'interested', 'great post',
    'thanks for sharing', 'commenting for reach',
)

NICHE_SIGNALS = (
    # backend / infra
    'nodejs', 'node.js', 'backend', 'api design', 'rest api', 'graphql',
    'microservices', 'distributed systems', 'system design', 'architecture',
    'kubernetes', 'docker', 'devops', 'ci/cd', 'deployment',
    # frontend / full-stack
    'nextjs', 'next.js', 'react', 'typescript', 'full stack', 'fullstack',
    # ai / automation
    'ai workflow', 'automation', 'n8n', 'llm', 'ai agent', 'openai', 'gemini',
    'langchain', 'rag', 'prompt engineering',
    # general high-value
    'saas', 'startup', 'founder', 'cto', 'ceo', 'product', 'engineering',
    'developer experience', 'open source', 'shipped', 'launched',
)

SENIORITY_SIGNALS = (
    ('founder', 25), ('co-founder', 25), ('ceo', 25), ('cto', 22),
    ('chief', 20), ('vp', 20), ('vice president', 20), ('partner', 18),
    ('director', 15), ('head of', 15), ('principal', 14),
    ('staff engineer', 14), ('staff software', 14),
    ('engineering manager', 12), ('product manager', 12), ('sr.', 10),
    ('senior', 10), ('lead', 10),
)

CREATOR_PROXY_SIGNALS = ('creator', 'newsletter')
INVESTOR_PROXY_SIGNALS = ('angel', 'investor')


DEFAULT_SIGNALS = SignalTables(
    version=SIGNALS_VERSION,
    open_to_work=OPEN_TO_WORK_SIGNALS,
    student=STUDENT_SIGNALS,
    job_post=JOB_POST_SIGNALS,
    grief=GRIEF_SIGNALS,
    good_content=GOOD_CONTENT_SIGNALS,
    low_value=LOW_VALUE_SIGNALS,
    story_arc=STORY_ARC_SIGNALS,
    ai_boilerplate=AI_BOILERPLATE_SIGNALS,
    engagement_pod=ENGAGEMENT_POD_SIGNALS,
    niche=NICHE_SIGNALS,
    seniority=SENIORITY_SIGNALS,
    creator_proxy=CREATOR_PROXY_SIGNALS,
    investor_proxy=INVESTOR_PROXY_SIGNALS,
)
