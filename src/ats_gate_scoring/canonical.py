"""Skill canonicalization via synonym equivalence classes."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from functools import lru_cache

# First member of each group is the canonical form.
DEFAULT_SYNONYM_GROUPS: tuple[tuple[str, ...], ...] = (
    ("javascript", "js", "ecmascript", "es6", "es2015"),
    ("typescript", "ts"),
    ("react", "react.js", "reactjs", "react js"),
    ("react native", "reactnative"),
    ("angular", "angular.js", "angularjs", "angular 2+"),
    ("vue", "vue.js", "vuejs", "vue 3"),
    ("next.js", "nextjs", "next js", "next"),
    ("node", "node.js", "nodejs", "node js"),
    ("express", "express.js", "expressjs"),
    ("python", "python3", "python 3"),
    ("java", "java se", "java ee", "j2ee"),
    ("spring", "spring boot", "spring framework", "springboot"),
    ("c#", "csharp", "c sharp", ".net", "dotnet"),
    ("c++", "cpp", "c plus plus"),
    ("go", "golang", "go lang"),
    ("rust", "rust lang", "rustlang"),
    ("ruby", "ruby on rails", "rails", "ror"),
    ("php", "laravel", "symfony"),
    ("swift", "swiftui"),
    ("kotlin", "kotlin/jvm"),
    ("sql", "structured query language"),
    ("mysql", "my sql"),
    ("postgresql", "postgres", "psql", "pg"),
    ("mongodb", "mongo", "mongo db"),
    ("redis", "redis cache"),
    ("elasticsearch", "elastic search", "elastic", "opensearch"),
    ("kafka", "apache kafka"),
    ("rabbitmq", "rabbit mq", "amqp"),
    ("aws", "amazon web services", "amazon aws"),
    ("gcp", "google cloud", "google cloud platform"),
    ("azure", "microsoft azure", "ms azure"),
    ("docker", "containerization", "containers"),
    ("kubernetes", "k8s", "kube"),
    ("terraform", "terraform iac", "tf"),
    ("ansible", "ansible automation"),
    ("jenkins", "jenkins ci"),
    ("ci/cd", "cicd", "ci cd", "continuous integration", "continuous deployment"),
    ("git", "github", "gitlab", "bitbucket", "version control"),
    ("rest", "rest api", "restful", "restful api"),
    ("graphql", "graph ql"),
    ("grpc", "g rpc"),
    ("microservices", "micro services", "micro-services"),
    ("machine learning", "ml", "deep learning", "dl"),
    ("artificial intelligence", "ai"),
    ("nlp", "natural language processing"),
    ("computer vision", "cv", "image recognition"),
    ("tensorflow", "tf", "tensor flow"),
    ("pytorch", "py torch", "torch"),
    ("scikit-learn", "sklearn", "scikit learn"),
    ("pandas", "pd"),
    ("numpy", "np"),
    ("spark", "apache spark", "pyspark"),
    ("hadoop", "apache hadoop", "hdfs"),
    ("airflow", "apache airflow"),
    ("dbt", "data build tool"),
    ("snowflake", "snowflake db"),
    ("databricks", "data bricks"),
    ("tableau", "tableau desktop"),
    ("power bi", "powerbi", "power-bi"),
    ("html", "html5"),
    ("css", "css3", "scss", "sass", "less"),
    ("tailwind", "tailwind css", "tailwindcss"),
    ("bootstrap", "bootstrap 5"),
    ("webpack", "webpack 5"),
    ("vite", "vitejs"),
    ("agile", "scrum", "kanban"),
    ("jira", "atlassian jira"),
    ("figma", "figma design"),
    ("linux", "unix", "ubuntu", "centos", "debian"),
)


class SkillCanonicalizer:
    """Maps free-text skill tokens to the canonical member of their synonym group.

    Unknown tokens pass through lower-cased and trimmed. When a term appears
    in more than one group the last group wins.
    """

    def __init__(self, groups: Sequence[Sequence[str]] = DEFAULT_SYNONYM_GROUPS) -> None:
        """Build the lookup table from equivalence classes."""
        self._lookup: dict[str, str] = {}
        for group in groups:
            if not group:
                continue
            canonical = group[0].strip().lower()
            for term in group:
                self._lookup[term.strip().lower()] = canonical

    def canonicalize(self, token: str) -> str:
        """Return the canonical form of a single token."""
        lowered = token.strip().lower()
        return self._lookup.get(lowered, lowered)

    def canonicalize_all(self, tokens: Iterable[str]) -> set[str]:
        """Canonicalize many tokens, dropping blanks."""
        return {self.canonicalize(t) for t in tokens if t and t.strip()}

    def __len__(self) -> int:
        return len(self._lookup)


@lru_cache(maxsize=1)
def default_canonicalizer() -> SkillCanonicalizer:
    """Shared canonicalizer built from the default table."""
    return SkillCanonicalizer()
