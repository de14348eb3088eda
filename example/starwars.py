"""
Star Wars example schema.

Usage (from this directory):
    typegraph execute starwars:root hero.graphql --context starwars:context
    typegraph execute starwars:root hero.graphql --context starwars:context --variables episode.yaml
    typegraph types starwars:root

Or in code:
    from starwars import context, root
    from typegraph import execute

    data, errors = execute("{ hero { name } }", root, context=context())
"""

import asyncio
from enum import Enum

from typegraph import (
    Arg,
    EnumType,
    InputObjectType,
    InterfaceType,
    ListOf,
    ObjectType,
    RootNode,
    Shared,
    UnionType,
    field,
    instance_resolver,
)


class Episode(Enum):
    NEW_HOPE = 4
    EMPIRE = 5
    JEDI = 6


class EpisodeType(EnumType):
    """One of the films in the Star Wars Trilogy"""
    graphql_name = "Episode"
    enum = Episode


class Character(InterfaceType):
    """A character in the Star Wars Trilogy"""

    id = field("String!", description="The id of the character")
    name = field("String", description="The name of the character")
    friends = field("[Character]", description="The friends of the character")
    appears_in = field(ListOf(EpisodeType), description="Which movies they appear in")

    @instance_resolver("Human")
    def as_human(self, context):
        return self.value if isinstance(self.value, Human) else None

    @instance_resolver("Droid")
    def as_droid(self, context):
        return self.value if isinstance(self.value, Droid) else None


class Human(ObjectType):
    """A humanoid creature in the Star Wars universe"""
    interfaces = (Character,)

    id = field("String!")
    name = field("String")
    appears_in = field(ListOf(EpisodeType))
    home_planet = field("String", description="The home planet of the human, or null if unknown")

    def __init__(self, id, name, friend_ids, appears_in, home_planet=None):
        self.id = id
        self.name = name
        self.friend_ids = friend_ids
        self.appears_in = appears_in
        self.home_planet = home_planet

    @field("[Character]")
    def friends(self, executor):
        return [Character(character) for character in executor.context.friends_of(self)]


class Droid(ObjectType):
    """A mechanical creature in the Star Wars universe"""
    interfaces = (Character,)

    id = field("String!")
    name = field("String")
    appears_in = field(ListOf(EpisodeType))
    primary_function = field("String", description="The primary function of the droid")

    def __init__(self, id, name, friend_ids, appears_in, primary_function=None):
        self.id = id
        self.name = name
        self.friend_ids = friend_ids
        self.appears_in = appears_in
        self.primary_function = primary_function

    @field("[Character]")
    async def friends(self, executor):
        # Simulates a remote lookup
        await asyncio.sleep(0)
        return [Character(character) for character in executor.context.friends_of(self)]


class SearchResult(UnionType):
    @instance_resolver(Human)
    def as_human(self, context):
        return self.value if isinstance(self.value, Human) else None

    @instance_resolver(Droid)
    def as_droid(self, context):
        return self.value if isinstance(self.value, Droid) else None


class ReviewInput(InputObjectType):
    stars = Arg("Int!")
    commentary = Arg("String")


class Review(ObjectType):
    episode = field(EpisodeType)
    stars = field("Int!")
    commentary = field("String")

    def __init__(self, episode, stars, commentary):
        self.episode = episode
        self.stars = stars
        self.commentary = commentary


class Database:
    """In-memory character store passed to resolvers as the context."""

    def __init__(self):
        self.characters = {}
        self.reviews = []
        for character in (
            Human("1000", "Luke Skywalker", ["1002", "1003", "2000", "2001"],
                  [Episode.NEW_HOPE, Episode.EMPIRE, Episode.JEDI], "Tatooine"),
            Human("1001", "Darth Vader", ["1004"],
                  [Episode.NEW_HOPE, Episode.EMPIRE, Episode.JEDI], "Tatooine"),
            Human("1002", "Han Solo", ["1000", "1003", "2001"],
                  [Episode.NEW_HOPE, Episode.EMPIRE, Episode.JEDI]),
            Human("1003", "Leia Organa", ["1000", "1002", "2000", "2001"],
                  [Episode.NEW_HOPE, Episode.EMPIRE, Episode.JEDI], "Alderaan"),
            Human("1004", "Wilhuff Tarkin", ["1001"], [Episode.NEW_HOPE]),
            Droid("2000", "C-3PO", ["1000", "1002", "1003", "2001"],
                  [Episode.NEW_HOPE, Episode.EMPIRE, Episode.JEDI], "Protocol"),
            Droid("2001", "R2-D2", ["1000", "1002", "1003"],
                  [Episode.NEW_HOPE, Episode.EMPIRE, Episode.JEDI], "Astromech"),
        ):
            self.characters[character.id] = Shared(character)

    def get(self, id):
        handle = self.characters.get(id)
        return handle.clone() if handle is not None else None

    def get_object(self, id):
        handle = self.characters.get(id)
        return handle.get() if handle is not None else None

    def friends_of(self, character):
        return [self.get_object(friend_id) for friend_id in character.friend_ids]

    def hero(self, episode):
        # Luke is the hero of Episode V, R2-D2 of every other film
        return self.get_object("1000" if episode is Episode.EMPIRE else "2001")


class Query(ObjectType):
    """The query root of the Star Wars schema"""

    @field(Character, args={"episode": Arg(EpisodeType)})
    def hero(self, executor, episode=None):
        return Character(executor.context.hero(episode))

    @field(Shared[Human], args={"id": Arg("String!")})
    def human(self, executor, id):
        handle = executor.context.get(id)
        return handle if handle is not None and isinstance(handle.get(), Human) else None

    @field(Shared[Droid], args={"id": Arg("String!")})
    def droid(self, executor, id):
        handle = executor.context.get(id)
        return handle if handle is not None and isinstance(handle.get(), Droid) else None

    @field("[SearchResult!]!", args={"text": Arg("String!")})
    def search(self, executor, text):
        needle = text.lower()
        return [
            SearchResult(handle.get())
            for handle in executor.context.characters.values()
            if needle in handle.get().name.lower()
        ]


class Mutation(ObjectType):
    @field(Review, args={"episode": Arg(EpisodeType), "review": Arg(ReviewInput, description="Stars and commentary")})
    def create_review(self, executor, episode, review):
        created = Review(episode, review.stars, review.commentary)
        executor.context.reviews.append(created)
        return created


root = RootNode(Query(), Mutation(), types=[SearchResult])


def context():
    """Context factory for `typegraph execute --context starwars:context`."""
    return Database()
