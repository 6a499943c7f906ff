from __future__ import annotations

from typing import Dict, List, Tuple

from .schemas import GRADES, SUBJECT_TYPES, Topic, TopicRef


# grade -> subject type -> (id, name, description)
_CATALOG: Dict[str, Dict[str, List[Tuple[str, str, str]]]] = {
    "K": {
        "grammar": [
            ("letters", "Letter Recognition", "Identifying uppercase and lowercase letters"),
            ("phonics", "Basic Phonics", "Letter sounds and simple blending"),
            ("sight-words", "Sight Words", "Common high-frequency words"),
            ("sentence-structure", "Simple Sentences", "Understanding basic sentence structure"),
        ],
        "vocabulary": [
            ("colors", "Colors", "Basic color names"),
            ("shapes", "Shapes", "Circle, square, triangle, rectangle"),
            ("numbers", "Numbers 1-20", "Number words and recognition"),
            ("family", "Family Members", "Mom, dad, sister, brother, etc."),
            ("body-parts", "Body Parts", "Head, hands, feet, eyes, etc."),
        ],
        "readingComprehension": [
            ("picture-stories", "Picture Stories", "Understanding stories through pictures"),
            ("sequence", "Story Sequence", "What happens first, next, last"),
            ("characters", "Story Characters", "Identifying main characters"),
        ],
    },
    "1": {
        "grammar": [
            ("nouns", "Nouns", "People, places, and things"),
            ("verbs", "Action Verbs", "Words that show action"),
            ("adjectives", "Describing Words", "Words that describe nouns"),
            ("capitalization", "Capitalization", "Beginning of sentences and names"),
            ("punctuation", "End Punctuation", "Periods, question marks, exclamation points"),
        ],
        "vocabulary": [
            ("phonics-patterns", "Phonics Patterns", "CVC words, blends, digraphs"),
            ("compound-words", "Compound Words", "Two words that make one"),
            ("opposites", "Opposites", "Hot/cold, big/small, up/down"),
            ("rhyming", "Rhyming Words", "Words that sound alike"),
        ],
        "readingComprehension": [
            ("main-idea", "Main Idea", "What the story is mostly about"),
            ("details", "Story Details", "Important information in the story"),
            ("predictions", "Making Predictions", "What will happen next"),
            ("connections", "Text Connections", "Relating to personal experiences"),
        ],
    },
    "2": {
        "grammar": [
            ("noun-types", "Common/Proper Nouns", "Regular nouns vs. specific names"),
            ("pronouns", "Pronouns", "He, she, it, they, we"),
            ("verb-tenses", "Past/Present Verbs", "Yesterday, today actions"),
            ("articles", "Articles", "A, an, the"),
            ("contractions", "Contractions", "Can't, don't, won't"),
        ],
        "vocabulary": [
            ("prefixes", "Simple Prefixes", "Un-, re-, pre-"),
            ("suffixes", "Simple Suffixes", "-ed, -ing, -er, -est"),
            ("synonyms", "Synonyms", "Words with similar meanings"),
            ("multiple-meaning", "Multiple Meaning Words", "Words with more than one meaning"),
        ],
        "readingComprehension": [
            ("cause-effect", "Cause and Effect", "Why things happen and what happens"),
            ("compare-contrast", "Compare and Contrast", "How things are alike and different"),
            ("story-elements", "Story Elements", "Characters, setting, problem, solution"),
            ("fact-opinion", "Fact vs. Opinion", "What can be proven vs. what someone thinks"),
        ],
    },
    "3": {
        "grammar": [
            ("subject-predicate", "Subject and Predicate", "Who/what and what they do"),
            ("plural-nouns", "Plural Nouns", "Regular and irregular plurals"),
            ("possessive-nouns", "Possessive Nouns", "Showing ownership with apostrophes"),
            ("adverbs", "Adverbs", "Words that describe verbs"),
            ("conjunctions", "Conjunctions", "And, but, or connecting words"),
        ],
        "vocabulary": [
            ("root-words", "Root Words", "Base words before adding prefixes/suffixes"),
            ("antonyms", "Antonyms", "Words with opposite meanings"),
            ("homophones", "Homophones", "Words that sound the same but different meanings"),
            ("context-clues", "Context Clues", "Using surrounding words to understand meaning"),
        ],
        "readingComprehension": [
            ("theme", "Theme", "The message or lesson of a story"),
            ("inference", "Making Inferences", "Reading between the lines"),
            ("summarizing", "Summarizing", "Retelling the most important parts"),
            ("text-features", "Text Features", "Headings, captions, bold words"),
        ],
    },
    "4": {
        "grammar": [
            ("sentence-types", "Types of Sentences", "Declarative, interrogative, imperative, exclamatory"),
            ("compound-sentences", "Compound Sentences", "Joining sentences with conjunctions"),
            ("quotation-marks", "Quotation Marks", "Direct speech and dialogue"),
            ("relative-pronouns", "Relative Pronouns", "Who, which, that"),
            ("progressive-verbs", "Progressive Verb Tenses", "Present and past progressive"),
        ],
        "vocabulary": [
            ("greek-latin-roots", "Greek and Latin Roots", "Common word roots and their meanings"),
            ("figurative-language", "Figurative Language", "Similes, metaphors, idioms"),
            ("academic-vocabulary", "Academic Vocabulary", "Words used in school subjects"),
            ("word-relationships", "Word Relationships", "Categories, analogies"),
        ],
        "readingComprehension": [
            ("point-of-view", "Point of View", "First person, third person"),
            ("text-structure", "Text Structure", "Sequence, problem/solution, compare/contrast"),
            ("author-purpose", "Author's Purpose", "Inform, persuade, entertain"),
            ("drawing-conclusions", "Drawing Conclusions", "Using evidence to make judgments"),
        ],
    },
    "5": {
        "grammar": [
            ("complex-sentences", "Complex Sentences", "Independent and dependent clauses"),
            ("verb-moods", "Verb Moods", "Indicative, imperative, interrogative"),
            ("perfect-tenses", "Perfect Verb Tenses", "Present, past, and future perfect"),
            ("prepositions", "Prepositions", "Words showing position or direction"),
            ("interjections", "Interjections", "Words expressing emotion"),
        ],
        "vocabulary": [
            ("etymology", "Etymology", "Word origins and history"),
            ("connotation", "Connotation and Denotation", "Emotional vs. literal meanings"),
            ("technical-terms", "Technical Terms", "Subject-specific vocabulary"),
            ("word-analysis", "Word Analysis", "Breaking down unfamiliar words"),
        ],
        "readingComprehension": [
            ("character-analysis", "Character Analysis", "Understanding character traits and motivations"),
            ("plot-analysis", "Plot Analysis", "Exposition, rising action, climax, resolution"),
            ("compare-texts", "Comparing Texts", "Similarities and differences between texts"),
            ("author-craft", "Author's Craft", "How authors use language and literary devices"),
        ],
    },
    "6": {
        "grammar": [
            ("phrases-clauses", "Phrases and Clauses", "Independent and dependent clauses"),
            ("active-passive", "Active and Passive Voice", "Subject performing vs. receiving action"),
            ("parallel-structure", "Parallel Structure", "Consistent grammatical patterns"),
            ("modifier-placement", "Modifier Placement", "Avoiding misplaced and dangling modifiers"),
            ("comma-rules", "Comma Rules", "Complex comma usage in sentences"),
        ],
        "vocabulary": [
            ("morphology", "Morphology", "Word formation and structure"),
            ("semantic-relationships", "Semantic Relationships", "How words relate in meaning"),
            ("register", "Language Register", "Formal vs. informal language"),
            ("domain-specific", "Domain-Specific Vocabulary", "Subject area terminology"),
        ],
        "readingComprehension": [
            ("literary-devices", "Literary Devices", "Symbolism, foreshadowing, irony"),
            ("text-analysis", "Text Analysis", "Deep reading and interpretation"),
            ("argument-analysis", "Argument Analysis", "Claims, evidence, reasoning"),
            ("media-literacy", "Media Literacy", "Analyzing different types of media"),
        ],
    },
    "7": {
        "grammar": [
            ("sentence-variety", "Sentence Variety", "Combining simple, compound, and complex sentences"),
            ("subjunctive-mood", "Subjunctive Mood", "Expressing wishes, hypotheticals, demands"),
            ("gerunds-infinitives", "Gerunds and Infinitives", "Verbal forms functioning as nouns"),
            ("appositives", "Appositives", "Noun phrases that rename or explain"),
            ("semicolon-usage", "Semicolon Usage", "Connecting related independent clauses"),
        ],
        "vocabulary": [
            ("etymology-advanced", "Advanced Etymology", "Complex word origins and development"),
            ("nuance", "Nuance in Meaning", "Subtle differences in word meaning"),
            ("rhetoric", "Rhetorical Language", "Language used for persuasion"),
            ("archaic-language", "Archaic Language", "Old or outdated language forms"),
        ],
        "readingComprehension": [
            ("theme-analysis", "Theme Analysis", "Complex themes and their development"),
            ("perspective", "Multiple Perspectives", "Different viewpoints in texts"),
            ("critical-reading", "Critical Reading", "Evaluating arguments and evidence"),
            ("intertextuality", "Intertextuality", "Connections between different texts"),
        ],
    },
    "8": {
        "grammar": [
            ("advanced-punctuation", "Advanced Punctuation", "Colons, dashes, parentheses"),
            ("conditional-sentences", "Conditional Sentences", "If-then constructions and their variations"),
            ("ellipsis", "Ellipsis and Omission", "When and how to omit words"),
            ("style-consistency", "Style Consistency", "Maintaining consistent voice and tone"),
            ("error-analysis", "Error Analysis", "Identifying and correcting common mistakes"),
        ],
        "vocabulary": [
            ("academic-discourse", "Academic Discourse", "Language of academic writing"),
            ("precision", "Precision in Language", "Choosing the most accurate words"),
            ("wordplay", "Wordplay and Puns", "Creative uses of language"),
            ("borrowed-words", "Borrowed Words", "Words adopted from other languages"),
        ],
        "readingComprehension": [
            ("rhetorical-analysis", "Rhetorical Analysis", "How authors persuade readers"),
            ("synthesis", "Synthesis", "Combining information from multiple sources"),
            ("evaluation", "Evaluation", "Judging the quality and validity of texts"),
            ("implicit-meaning", "Implicit Meaning", "Understanding what's not directly stated"),
        ],
    },
    "9": {
        "grammar": [
            ("advanced-clauses", "Advanced Clause Types", "Noun, adjective, and adverb clauses"),
            ("coordination-subordination", "Coordination and Subordination", "Balancing sentence elements"),
            ("nominalization", "Nominalization", "Converting verbs and adjectives to nouns"),
            ("stylistic-devices", "Stylistic Devices", "Grammar for effect and emphasis"),
            ("formal-register", "Formal Register", "Academic and professional writing conventions"),
        ],
        "vocabulary": [
            ("sophisticated-vocabulary", "Sophisticated Vocabulary", "College-level word choices"),
            ("specialized-terminology", "Specialized Terminology", "Field-specific language"),
            ("language-evolution", "Language Evolution", "How language changes over time"),
            ("contextual-meaning", "Contextual Meaning", "How context affects word meaning"),
        ],
        "readingComprehension": [
            ("literary-criticism", "Literary Criticism", "Analyzing literature through different lenses"),
            ("philosophical-texts", "Philosophical Texts", "Understanding complex abstract ideas"),
            ("historical-context", "Historical Context", "How time period affects meaning"),
            ("cultural-analysis", "Cultural Analysis", "Understanding cultural influences in texts"),
        ],
    },
    "10": {
        "grammar": [
            ("advanced-syntax", "Advanced Syntax", "Complex sentence structures and patterns"),
            ("rhetorical-grammar", "Rhetorical Grammar", "Using grammar for persuasive effect"),
            ("dialect-variations", "Dialect Variations", "Understanding different English varieties"),
            ("register-switching", "Register Switching", "Adapting language for different audiences"),
            ("grammar-style", "Grammar and Style", "How grammar choices affect meaning"),
        ],
        "vocabulary": [
            ("etymology-analysis", "Etymology Analysis", "Deep word history investigation"),
            ("semantic-fields", "Semantic Fields", "Groups of related word meanings"),
            ("pragmatics", "Pragmatics", "How context affects language use"),
            ("lexical-analysis", "Lexical Analysis", "Systematic study of word choice"),
        ],
        "readingComprehension": [
            ("discourse-analysis", "Discourse Analysis", "How language creates meaning in texts"),
            ("ideological-critique", "Ideological Critique", "Examining underlying beliefs and values"),
            ("comparative-literature", "Comparative Literature", "Analyzing texts across cultures"),
            ("reader-response", "Reader-Response Theory", "How readers create meaning"),
        ],
    },
    "11": {
        "grammar": [
            ("advanced-mechanics", "Advanced Mechanics", "Complex punctuation and formatting"),
            ("stylistic-analysis", "Stylistic Analysis", "Analyzing authors' grammatical choices"),
            ("language-variation", "Language Variation", "Regional, social, and historical differences"),
            ("prescriptive-descriptive", "Prescriptive vs. Descriptive", "Grammar rules vs. actual usage"),
            ("error-correction", "Advanced Error Correction", "Complex editing and proofreading"),
        ],
        "vocabulary": [
            ("graduate-vocabulary", "Graduate-Level Vocabulary", "Advanced academic and professional terms"),
            ("linguistic-terminology", "Linguistic Terminology", "Terms for analyzing language"),
            ("cross-linguistic", "Cross-Linguistic Comparison", "Comparing English with other languages"),
            ("vocabulary-instruction", "Vocabulary Instruction", "How to learn and teach vocabulary"),
        ],
        "readingComprehension": [
            ("metacognitive-reading", "Metacognitive Reading", "Thinking about thinking while reading"),
            ("research-synthesis", "Research Synthesis", "Combining scholarly sources"),
            ("argument-construction", "Argument Construction", "Building complex arguments from texts"),
            ("disciplinary-reading", "Disciplinary Reading", "Reading in specific academic fields"),
        ],
    },
    "12": {
        "grammar": [
            ("linguistic-analysis", "Linguistic Analysis", "Systematic study of language structures"),
            ("historical-grammar", "Historical Grammar", "How English grammar has evolved"),
            ("professional-writing", "Professional Writing", "Grammar for workplace communication"),
            ("editing-mastery", "Editing Mastery", "Advanced editing and revision skills"),
            ("style-guides", "Style Guides", "MLA, APA, Chicago, and other formatting systems"),
        ],
        "vocabulary": [
            ("professional-vocabulary", "Professional Vocabulary", "Workplace and career-specific terms"),
            ("research-vocabulary", "Research Vocabulary", "Terms for academic research"),
            ("critical-vocabulary", "Critical Vocabulary", "Terms for analysis and critique"),
            ("vocabulary-pedagogy", "Vocabulary Pedagogy", "How vocabulary is taught and learned"),
        ],
        "readingComprehension": [
            ("advanced-research", "Advanced Research Skills", "Sophisticated information literacy"),
            ("scholarly-discourse", "Scholarly Discourse", "Understanding academic conversations"),
            ("independent-analysis", "Independent Analysis", "Original interpretation and critique"),
            ("preparation-college", "College Preparation", "Reading skills for higher education"),
        ],
    },
}

TOPIC_CATALOG: Dict[str, Dict[str, List[Topic]]] = {
    grade: {
        subject: [Topic(id=i, name=n, description=d) for i, n, d in topics]
        for subject, topics in subjects.items()
    }
    for grade, subjects in _CATALOG.items()
}


def get_topics(grade: str, subject_type: str) -> List[Topic]:
    if grade not in GRADES:
        raise ValueError(f"grade must be one of {GRADES}")
    if subject_type not in SUBJECT_TYPES:
        raise ValueError(f"subject_type must be one of {SUBJECT_TYPES}")
    return list(TOPIC_CATALOG[grade][subject_type])


def resolve_topics(grade: str, subject_type: str, topic_ids: List[str]) -> List[TopicRef]:
    """Turn catalog ids into ordered topic references, rejecting unknown ids."""
    by_id = {t.id: t for t in get_topics(grade, subject_type)}
    unknown = [tid for tid in topic_ids if tid not in by_id]
    if unknown:
        raise ValueError(f"unknown topics for grade {grade} {subject_type}: {', '.join(unknown)}")
    return [TopicRef(id=tid, name=by_id[tid].name) for tid in topic_ids]
