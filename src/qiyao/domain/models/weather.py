WEATHERS = (
    "Clear Skies",
    "Heavy Fog",
    "Torrential Rain",
    "Fine Drizzle",
    "Howling Gale",
    "Blizzard",
    "Scorching Sun",
    "Thunderstorm",
    "Overcast Gloom",
    "Frost at Dawn",
)
