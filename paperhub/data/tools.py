from typing import Optional

from pydantic import BaseModel


class Tool(BaseModel):
    id: int
    title: str
    desc: str
    category: str
    category_label: str
    tag_color: str
    icon: str
    link: str
    howto: str
    likes: int
    is_internal: bool = False
    action_text: Optional[str] = None


CATEGORIES = [
    {"id": "all", "label": "All"},
    {"id": "screening", "label": "Paper Screening"},
    {"id": "search", "label": "Databases"},
    {"id": "writing", "label": "LaTeX"},
    {"id": "submit", "label": "Submission"},
    {"id": "citation", "label": "Citations / References"},
    {"id": "figure", "label": "Figures / Diagrams"},
    {"id": "llm", "label": "LLM Tools"},
    {"id": "calc", "label": "Calculators"},
]

AUTHOR_CONVERTER_ID = 20
IMPROVEMENT_CALCULATOR_ID = 17

TOOLS = [
    Tool(id=20, title="Final Author Name Converter", desc="Turns commas into 'and' and spaces inside names into '~'. Essential when writing BibTeX entries and paper author lists.", category="writing", category_label="LaTeX", tag_color="blue", icon="user-check", link="#", howto="1. Enter the author list.\n2. Commas become 'and', spaces inside names become '~'.", likes=120, is_internal=True, action_text="Use converter"),
    Tool(id=17, title="Improvement Calculator", desc="Computes the improvement rate of an experimental result over the baseline.", category="calc", category_label="Calculators", tag_color="indigo", icon="calculator", link="#", howto="Enter the numbers to get the improvement immediately.", likes=85, is_internal=True, action_text="Open calculator"),
    Tool(id=18, title="OpenReview", desc="Academic paper review and submission system. Follow the transparent review process of major conferences.", category="submit", category_label="Submission", tag_color="blue", icon="check-square", link="https://openreview.net/", howto="Track the review status of major AI conferences.", likes=142),
    Tool(id=19, title="Paper Copilot", desc="Conference submission schedules and paper management. Keep track of deadlines and required checklists.", category="submit", category_label="Submission", tag_color="emerald", icon="send", link="https://papercopilot.com/", howto="Search conference schedules and add them to your dashboard.", likes=98),
    Tool(id=13, title="Hugging Face Papers", desc="Trending AI and machine learning papers in real time.", category="screening", category_label="Paper Screening", tag_color="yellow", icon="trending-up", link="https://huggingface.co/papers/trending", howto="See the latest research trends at a glance.", likes=215),
    Tool(id=14, title="AlphaXiv", desc="Open community to discuss arXiv papers in real time.", category="screening", category_label="Paper Screening", tag_color="blue", icon="message-square", link="https://alphaxiv.org/", howto="Enter an arXiv id to join the discussion.", likes=156),
    Tool(id=15, title="Scholar Inbox", desc="Learns your interests and recommends arXiv papers every day.", category="screening", category_label="Paper Screening", tag_color="emerald", icon="inbox", link="https://scholarinbox.com/", howto="Get a personalized paper feed.", likes=182),
    Tool(id=3, title="Zotero", desc="Open-source reference manager that automates citations.", category="citation", category_label="Citations / References", tag_color="indigo", icon="bookmark", link="https://www.zotero.org", howto="Save and organize bibliographic records quickly.", likes=189),
    Tool(id=4, title="Google Scholar", desc="Search engine for scholarly literature worldwide.", category="search", category_label="Databases", tag_color="orange", icon="search", link="https://scholar.google.com", howto="Search academic material broadly.", likes=433),
    Tool(id=7, title="Squoosh", desc="Image resizing and optimization tool.", category="figure", category_label="Figures / Diagrams", tag_color="rose", icon="image", link="https://squoosh.app/", howto="Shrink image files dramatically.", likes=120),
    Tool(id=16, title="Gradients", desc="Polished gradient palettes for paper figures and slides.", category="figure", category_label="Figures / Diagrams", tag_color="blue", icon="palette", link="https://gradients.app/en", howto="Copy the color codes you need.", likes=95),
    Tool(id=8, title="ChatGPT", desc="Conversational AI by OpenAI.", category="llm", category_label="LLM Tools", tag_color="emerald", icon="message-square", link="https://chatgpt.com/", howto="Use it for drafting and brainstorming.", likes=890),
    Tool(id=9, title="Gemini", desc="Google's latest AI model.", category="llm", category_label="LLM Tools", tag_color="blue", icon="sparkles", link="https://gemini.google.com/", howto="Strong at summarizing live information and data analysis.", likes=654),
    Tool(id=10, title="Claude", desc="Anthropic's AI model.", category="llm", category_label="LLM Tools", tag_color="purple", icon="brain", link="https://claude.ai/", howto="Good for analyzing long papers and careful proofreading.", likes=721),
    Tool(id=11, title="Overleaf", desc="Web-based collaborative LaTeX editor.", category="writing", category_label="LaTeX", tag_color="indigo", icon="edit-3", link="https://www.overleaf.com/", howto="Collaborate with co-authors in real time.", likes=452),
    Tool(id=12, title="Word Counter", desc="Real-time word counting tool.", category="writing", category_label="LaTeX", tag_color="orange", icon="type", link="https://wordcounter.net/", howto="Check the length of your text as you type.", likes=310),
]

TOOLS_BY_ID = {tool.id: tool for tool in TOOLS}
