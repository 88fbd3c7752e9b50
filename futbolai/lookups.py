"""Curated lookup tables used by the classifier, providers and translation.

Mostly plain data. Keys of the matching tables are normalized: lower-case, no
diacritics.
"""

# National teams. A bare country name almost always means its national side.
COUNTRY_NAMES = (
    "argentina", "brazil", "uruguay", "paraguay", "ecuador", "chile", "colombia",
    "peru", "bolivia", "venezuela", "mexico", "usa", "united states", "canada",
    "costa rica", "france", "england", "germany", "spain", "italy", "portugal",
    "netherlands", "belgium", "switzerland", "sweden", "norway", "denmark",
    "poland", "croatia", "serbia", "russia", "ukraine", "turkey", "greece",
    "japan", "south korea", "china", "australia", "new zealand", "morocco",
    "egypt", "senegal", "ghana", "nigeria", "ivory coast", "cameroon", "algeria",
    "tunisia", "south africa", "saudi arabia", "iran", "iraq", "uae", "qatar",
    "wales", "scotland", "ireland", "finland", "austria", "hungary", "czech",
    "slovakia", "slovenia",
)

# Alias -> display name of the club.
MAJOR_CLUBS = {
    "real madrid": "Real Madrid",
    "barcelona": "Barcelona",
    "barca": "Barcelona",
    "manchester city": "Manchester City",
    "man city": "Manchester City",
    "manchester united": "Manchester United",
    "man united": "Manchester United",
    "man utd": "Manchester United",
    "liverpool": "Liverpool",
    "arsenal": "Arsenal",
    "chelsea": "Chelsea",
    "tottenham": "Tottenham Hotspur",
    "spurs": "Tottenham Hotspur",
    "ac milan": "AC Milan",
    "milan": "AC Milan",
    "inter": "Inter Milan",
    "inter milan": "Inter Milan",
    "inter miami": "Inter Miami",
    "juventus": "Juventus",
    "napoli": "Napoli",
    "as roma": "AS Roma",
    "roma": "AS Roma",
    "lazio": "Lazio",
    "atalanta": "Atalanta",
    "bayern munich": "Bayern Munich",
    "bayern": "Bayern Munich",
    "borussia dortmund": "Borussia Dortmund",
    "dortmund": "Borussia Dortmund",
    "psg": "Paris Saint-Germain",
    "paris saint-germain": "Paris Saint-Germain",
    "paris saint germain": "Paris Saint-Germain",
    "lyon": "Olympique Lyonnais",
    "olympique lyonnais": "Olympique Lyonnais",
    "marseille": "Marseille",
    "ajax": "Ajax",
    "psv": "PSV",
    "feyenoord": "Feyenoord",
    "atletico madrid": "Atletico Madrid",
    "atletico": "Atletico Madrid",
    "atletico mineiro": "Atletico Mineiro",
    "atletico nacional": "Atletico Nacional",
    "sevilla": "Sevilla",
    "real sociedad": "Real Sociedad",
    "valencia": "Valencia",
    "villarreal": "Villarreal",
    "boca juniors": "Boca Juniors",
    "river plate": "River Plate",
    "flamengo": "Flamengo",
    "palmeiras": "Palmeiras",
}

# Short aliases shared by several clubs; they only count as the whole query.
AMBIGUOUS_CLUB_ALIASES = frozenset({"inter", "milan", "roma", "atletico"})

# football-data.org team ids for the clubs above.
POPULAR_TEAM_IDS = {
    "Real Madrid": 86,
    "Barcelona": 81,
    "Manchester City": 65,
    "Manchester United": 66,
    "Liverpool": 64,
    "Arsenal": 57,
    "Chelsea": 61,
    "Tottenham Hotspur": 73,
    "AC Milan": 98,
    "Inter Milan": 108,
    "Juventus": 109,
    "Napoli": 113,
    "AS Roma": 100,
    "Lazio": 110,
    "Atalanta": 102,
    "Bayern Munich": 5,
    "Borussia Dortmund": 4,
    "Paris Saint-Germain": 524,
    "Olympique Lyonnais": 523,
    "Marseille": 516,
    "Ajax": 678,
    "PSV": 674,
    "Feyenoord": 675,
    "Atletico Madrid": 78,
    "Sevilla": 559,
    "Real Sociedad": 92,
    "Valencia": 95,
    "Villarreal": 94,
}

# Squads scanned, in order, when looking a player up on football-data.
SQUAD_SCAN_TEAMS = (
    "Real Madrid", "Barcelona", "Manchester City", "Liverpool", "Arsenal",
    "Chelsea", "Manchester United", "Tottenham Hotspur", "AC Milan",
    "Inter Milan", "Juventus", "Napoli", "Bayern Munich", "Borussia Dortmund",
    "Paris Saint-Germain",
)

CLUB_INDICATORS = frozenset({
    "fc", "cf", "afc", "sc", "cd", "ud", "united", "city", "real", "athletic",
    "atletico", "sporting", "club", "inter", "ac", "borussia", "olympique",
    "deportivo", "racing", "dynamo", "hotspur", "rovers", "wanderers",
    "juniors",
})

SQUAD_WORDS = frozenset({"squad", "roster", "lineup", "players", "squads"})

# Stripped from the end of a query before entity matching ("brazil squad").
TRAILING_QUERY_WORDS = ("national team", "squad", "team", "players", "roster", "lineup")

# Surname fragments of players the app is asked about most.
KNOWN_PLAYER_SURNAMES = frozenset({
    "messi", "ronaldo", "mbappe", "haaland", "neymar", "salah", "kane",
    "lewandowski", "modric", "benzema", "vinicius", "bellingham", "de bruyne",
    "pedri", "gavi", "yamal", "griezmann", "saka", "foden", "rodri", "kroos",
    "muller", "neuer", "courtois", "valverde", "lautaro", "dybala", "osimhen",
    "kvaratskhelia", "rashford", "odegaard", "musiala", "wirtz", "alvarez",
    "martinez", "suarez", "pele", "maradona", "zidane", "ronaldinho",
})

MATCH_FINISHED_WORDS = frozenset({"results", "result", "scores", "score", "latest", "finished"})
MATCH_SCHEDULED_WORDS = frozenset({"fixtures", "fixture", "schedule", "upcoming", "next", "calendar"})
MATCH_VOCABULARY = MATCH_FINISHED_WORDS | MATCH_SCHEDULED_WORDS | frozenset({"matches", "match", "games", "highlights"})

# Static team records used when every live source is unavailable.
HISTORICAL_TEAM_DATA = {
    "barcelona": {
        "name": "Barcelona",
        "type": "club",
        "country": "Spain",
        "founded": 1899,
        "stadium": "Spotify Camp Nou",
        "achievements": [
            "5x UEFA Champions League",
            "3x FIFA Club World Cup",
            "27x La Liga",
            "31x Copa del Rey",
        ],
    },
    "real madrid": {
        "name": "Real Madrid",
        "type": "club",
        "country": "Spain",
        "founded": 1902,
        "stadium": "Santiago Bernabeu",
        "achievements": [
            "15x UEFA Champions League",
            "5x FIFA Club World Cup",
            "36x La Liga",
            "20x Copa del Rey",
        ],
    },
    "manchester city": {
        "name": "Manchester City",
        "type": "club",
        "country": "England",
        "founded": 1880,
        "stadium": "Etihad Stadium",
        "achievements": [
            "1x UEFA Champions League",
            "1x FIFA Club World Cup",
            "9x Premier League",
            "7x FA Cup",
        ],
    },
    "argentina": {
        "name": "Argentina",
        "type": "national",
        "country": "Argentina",
        "founded": 1893,
        "stadium": "Estadio Monumental",
        "achievements": ["3x FIFA World Cup", "15x Copa America"],
    },
    "brazil": {
        "name": "Brazil",
        "type": "national",
        "country": "Brazil",
        "founded": 1914,
        "stadium": "Maracana",
        "achievements": ["5x FIFA World Cup", "9x Copa America"],
    },
    "uruguay": {
        "name": "Uruguay",
        "type": "national",
        "country": "Uruguay",
        "founded": 1900,
        "stadium": "Estadio Centenario",
        "achievements": ["2x FIFA World Cup", "15x Copa America"],
    },
    "france": {
        "name": "France",
        "type": "national",
        "country": "France",
        "founded": 1904,
        "stadium": "Stade de France",
        "achievements": ["2x FIFA World Cup", "2x UEFA European Championship"],
    },
    "spain": {
        "name": "Spain",
        "type": "national",
        "country": "Spain",
        "founded": 1920,
        "stadium": "Various",
        "achievements": ["1x FIFA World Cup", "4x UEFA European Championship"],
    },
    "germany": {
        "name": "Germany",
        "type": "national",
        "country": "Germany",
        "founded": 1900,
        "stadium": "Various",
        "achievements": ["4x FIFA World Cup", "3x UEFA European Championship"],
    },
}

# Term translations per category: English term -> {language: translation}.
TRANSLATIONS = {
    "teams": {
        "Real Madrid": {"es": "Real Madrid", "fr": "Real Madrid", "de": "Real Madrid", "pt": "Real Madrid"},
        "Barcelona": {"es": "Barcelona", "fr": "Barcelone", "de": "Barcelona", "pt": "Barcelona"},
        "Bayern Munich": {"es": "Bayern de Múnich", "fr": "Bayern Munich", "de": "Bayern München", "pt": "Bayern de Munique"},
        "Paris Saint-Germain": {"es": "PSG", "fr": "PSG", "de": "PSG", "pt": "PSG"},
        "AC Milan": {"es": "AC Milan", "fr": "AC Milan", "de": "AC Mailand", "pt": "AC Milan"},
        "Inter Milan": {"es": "Inter de Milán", "fr": "Inter Milan", "de": "Inter Mailand", "pt": "Inter de Milão"},
        "Atletico Madrid": {"es": "Atlético de Madrid", "fr": "Atlético Madrid", "de": "Atlético Madrid", "pt": "Atlético de Madrid"},
    },
    "countries": {
        "England": {"es": "Inglaterra", "fr": "Angleterre", "de": "England", "pt": "Inglaterra"},
        "Spain": {"es": "España", "fr": "Espagne", "de": "Spanien", "pt": "Espanha"},
        "France": {"es": "Francia", "fr": "France", "de": "Frankreich", "pt": "França"},
        "Germany": {"es": "Alemania", "fr": "Allemagne", "de": "Deutschland", "pt": "Alemanha"},
        "Italy": {"es": "Italia", "fr": "Italie", "de": "Italien", "pt": "Itália"},
        "Portugal": {"es": "Portugal", "fr": "Portugal", "de": "Portugal", "pt": "Portugal"},
        "Argentina": {"es": "Argentina", "fr": "Argentine", "de": "Argentinien", "pt": "Argentina"},
        "Brazil": {"es": "Brasil", "fr": "Brésil", "de": "Brasilien", "pt": "Brasil"},
        "Netherlands": {"es": "Países Bajos", "fr": "Pays-Bas", "de": "Niederlande", "pt": "Países Baixos"},
        "Mexico": {"es": "México", "fr": "Mexique", "de": "Mexiko", "pt": "México"},
        "Uruguay": {"es": "Uruguay", "fr": "Uruguay", "de": "Uruguay", "pt": "Uruguai"},
    },
    "positions": {
        "Goalkeeper": {"es": "Portero", "fr": "Gardien", "de": "Torwart", "pt": "Goleiro"},
        "Defender": {"es": "Defensa", "fr": "Défenseur", "de": "Abwehr", "pt": "Defesa"},
        "Midfielder": {"es": "Centrocampista", "fr": "Milieu", "de": "Mittelfeld", "pt": "Meio-campista"},
        "Forward": {"es": "Delantero", "fr": "Attaquant", "de": "Stürmer", "pt": "Atacante"},
        "Offence": {"es": "Delantero", "fr": "Attaquant", "de": "Stürmer", "pt": "Atacante"},
        "Defence": {"es": "Defensa", "fr": "Défenseur", "de": "Abwehr", "pt": "Defesa"},
        "Midfield": {"es": "Centrocampista", "fr": "Milieu", "de": "Mittelfeld", "pt": "Meio-campista"},
    },
    "achievements": {
        "FIFA World Cup": {"es": "Copa Mundial de la FIFA", "fr": "Coupe du monde de la FIFA", "de": "FIFA-Weltmeisterschaft", "pt": "Copa do Mundo FIFA"},
        "UEFA Champions League": {"es": "Liga de Campeones de la UEFA", "fr": "Ligue des champions de l'UEFA", "de": "UEFA Champions League", "pt": "Liga dos Campeões da UEFA"},
        "Copa America": {"es": "Copa América", "fr": "Copa América", "de": "Copa América", "pt": "Copa América"},
        "Ballon d'Or": {"es": "Balón de Oro", "fr": "Ballon d'Or", "de": "Ballon d'Or", "pt": "Bola de Ouro"},
    },
}

SUPPORTED_LANGUAGES = ("en", "es", "fr", "de", "pt")

STATIC_FACTS = (
    "The fastest hat-trick in Premier League history was scored by Sadio Mané in 2 minutes 56 seconds for Southampton against Aston Villa in 2015.",
    "Brazil has won the FIFA World Cup a record 5 times (1958, 1962, 1970, 1994, 2002).",
    "The first ever football World Cup was held in 1930 in Uruguay, and was won by the host nation.",
    "Lionel Messi holds the record for most Ballon d'Or awards with 8 wins.",
    "Real Madrid has won the European Cup / UEFA Champions League a record 15 times.",
    "The first football club in the world was Sheffield F.C., founded in 1857 in England.",
    "The fastest goal in World Cup history was scored by Hakan Şükür of Turkey in 10.89 seconds in 2002.",
    "The oldest football competition in the world is the FA Cup, first held in 1871-72.",
    "Pelé is the only player to have won three World Cups (1958, 1962, 1970).",
    "The longest football match lasted 3 hours 23 minutes between Stockport and Doncaster in 1946.",
    "A classic football is made of 32 panels: 12 pentagons and 20 hexagons.",
    "The most expensive football transfer ever was Neymar's €222 million move from Barcelona to PSG in 2017.",
    "The most goals scored by a player in a single calendar year is 91 by Lionel Messi in 2012.",
)

TRANSFER_WORDS = frozenset({"transfer", "transfers", "signing", "signings", "rumour", "rumours", "rumor", "rumors"})


def _transfer(player, from_club, to_club, date, fee, age, position, market_value, source, description):
    return {
        "player": player,
        "from": from_club,
        "to": to_club,
        "date": date,
        "fee": fee,
        "type": "transfer",
        "status": "confirmed",
        "description": description,
        "age": age,
        "position": position,
        "market_value": market_value,
        "source": source,
        "verified": True,
        "impact": "high",
    }


# Confirmed moves served when no live transfer source answers.
CONFIRMED_TRANSFERS = (
    _transfer("Kylian Mbappé", "Paris Saint-Germain", "Real Madrid", "2024-07-01", "Free", 25, "FW", "€180m",
              "Official Announcement", "Free transfer to Real Madrid after PSG contract expires"),
    _transfer("Jude Bellingham", "Borussia Dortmund", "Real Madrid", "2023-07-01", "€103m", 20, "MF", "€150m",
              "Sky Sports", "Record signing for Real Madrid"),
    _transfer("Harry Kane", "Tottenham Hotspur", "Bayern Munich", "2023-08-01", "€100m", 30, "FW", "€110m",
              "Bild", "Record transfer to Bayern Munich"),
    _transfer("Declan Rice", "West Ham United", "Arsenal", "2023-07-01", "€116m", 25, "MF", "€90m",
              "Sky Sports", "Record British transfer to Arsenal"),
    _transfer("Christopher Nkunku", "RB Leipzig", "Chelsea", "2023-07-01", "€60m", 26, "FW", "€75m",
              "Sky Sports", "Chelsea completes Nkunku signing"),
    _transfer("Josko Gvardiol", "RB Leipzig", "Manchester City", "2023-08-01", "€90m", 21, "DF", "€80m",
              "BBC Sport", "Record fee for a defender"),
    _transfer("Moisés Caicedo", "Brighton", "Chelsea", "2023-08-01", "€116m", 22, "MF", "€75m",
              "Sky Sports", "Record British transfer fee"),
    _transfer("Randal Kolo Muani", "Eintracht Frankfurt", "Paris Saint-Germain", "2023-09-01", "€95m", 25, "FW", "€80m",
              "L'Equipe", "PSG completes late signing"),
    _transfer("Kim Min-jae", "Napoli", "Bayern Munich", "2023-07-01", "€50m", 27, "DF", "€60m",
              "Bild", "Bayern signs Korean defender"),
    _transfer("Dominik Szoboszlai", "RB Leipzig", "Liverpool", "2023-07-01", "€70m", 23, "MF", "€50m",
              "Sky Sports", "Liverpool midfield signing"),
    _transfer("Mason Mount", "Chelsea", "Manchester United", "2023-07-01", "€64m", 24, "MF", "€60m",
              "BBC Sport", "Manchester United signing"),
    _transfer("Sandro Tonali", "AC Milan", "Newcastle United", "2023-07-01", "€70m", 23, "MF", "€50m",
              "Sky Sports", "Newcastle United signing"),
)
