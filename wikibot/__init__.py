"""
WikiBot

Internal assistant that answers team questions from the Notion wiki.

Philosophy:
- Answers come only from wiki pages, with their sources cited
- Every query is independent: nothing is stored between questions
- One broken page never breaks an answer

Usage:
    from wikibot.common import load_config
    from wikibot.retriever import WikiAnswerer

    answerer = WikiAnswerer.from_config(load_config())
    answer = await answerer.answer("What is our vacation policy?")
"""

__version__ = "0.1.0"
