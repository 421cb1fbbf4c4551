from pydantic import BaseModel


"""
Song Entity:
1. id (str): Unique identifier for the song. Primary key in SQL and key suffix in redis.
It is the match key for updates, never a mutable field.
2. name (str): The title of the song.
3. composer (str): Author attribution of the song.
"""
class Song(BaseModel):
    id: str
    name: str
    composer: str
